"""Seller listing insights API."""
