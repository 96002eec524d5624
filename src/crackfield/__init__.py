"""Animated crack and injection background."""
