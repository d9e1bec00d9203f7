"""Test doubles for the crate service collaborators."""
