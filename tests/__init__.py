"""Test suite package for the Site Manager API."""
