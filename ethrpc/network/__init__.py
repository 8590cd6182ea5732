from .tls import TLSContextBuilder, client_ssl_context, httpx_verify

__all__ = ["TLSContextBuilder", "client_ssl_context", "httpx_verify"]
