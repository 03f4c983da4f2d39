"""WMTS tile locator service."""
