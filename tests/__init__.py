"""Tests and shared test circuits."""
