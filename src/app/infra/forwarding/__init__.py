"""Entrega de change-sets ao sistema downstream."""

from app.infra.forwarding.http_forwarder import HttpForwarder, build_forward_payload

__all__ = ["HttpForwarder", "build_forward_payload"]
