"""Barcode label rendering and Zebra printer helpers."""
