"""Camada de entrada HTTP: rotas e connectors."""
