"""Test doubles for the payment flow collaborators."""
