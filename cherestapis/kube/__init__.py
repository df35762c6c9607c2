"""Kubernetes client bootstrap and workspace object discovery."""
