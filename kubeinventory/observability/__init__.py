"""Logging and Prometheus self-metrics for kubeinventory."""
