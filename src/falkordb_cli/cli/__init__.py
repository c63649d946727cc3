"""Command line and interactive front ends."""
