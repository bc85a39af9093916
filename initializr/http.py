"""Outbound HTTP client construction."""

import logging

import httpx

from .config import ProxyProperties

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpClientFactory:
    """Creates httpx clients, optionally routed through a forward proxy.

    Examples:
        Direct connection:

        >>> client = HttpClientFactory().create_client()

        Through an authenticating proxy:

        >>> factory = HttpClientFactory(
        ...     ProxyProperties(host="proxy.internal", port=3128,
        ...                     username="svc", password="secret")
        ... )
        >>> client = factory.create_client()
    """

    def __init__(
        self,
        proxy: ProxyProperties | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.proxy = proxy or ProxyProperties()
        self.timeout = timeout
        self.transport = transport

    def create_client(self) -> httpx.Client:
        kwargs: dict = {"timeout": self.timeout, "follow_redirects": True}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        elif self.proxy.enabled:
            kwargs["proxy"] = self._build_proxy()
            LOGGER.info(
                "Routing outbound HTTP through proxy",
                extra={"proxy_host": self.proxy.host, "proxy_port": self.proxy.port},
            )
        return httpx.Client(**kwargs)

    def _build_proxy(self) -> httpx.Proxy:
        if self.proxy.username:
            return httpx.Proxy(self.proxy.url, auth=(self.proxy.username, self.proxy.password))
        return httpx.Proxy(self.proxy.url)
