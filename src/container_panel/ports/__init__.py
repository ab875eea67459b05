"""Ports layer - interfaces between the domain and the outside world."""
