"""
Weaviate connection handling.
"""

import logging
import os
from typing import Dict, Optional

import weaviate
from weaviate.classes.init import AdditionalConfig, Auth, Timeout

logger = logging.getLogger(__name__)


def _split_host_port(url: str, default_port: int = 8080):
    url_parts = url.replace("http://", "").replace("https://", "").rstrip("/")
    if ":" in url_parts:
        host, port = url_parts.split(":", 1)
        return host, int(port)
    return url_parts, default_port


def connect_weaviate(
    url: Optional[str] = None,
    api_key: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> weaviate.WeaviateClient:
    """
    Connect to Weaviate, locally or on Weaviate Cloud when an API key is set.

    Args:
        url: Weaviate URL (WEAVIATE_URL)
        api_key: Weaviate Cloud API key (WEAVIATE_API_KEY)
        headers: Extra headers, e.g. vectorizer API keys

    Returns:
        Connected Weaviate client

    Raises:
        RuntimeError: If the instance is not ready
    """
    url = url or os.getenv("WEAVIATE_URL", "http://localhost:8080")
    api_key = api_key if api_key is not None else os.getenv("WEAVIATE_API_KEY")

    additional_config = AdditionalConfig(
        timeout=Timeout(
            init=int(os.getenv("WEAVIATE_INIT_TIMEOUT", "30")),
            query=int(os.getenv("WEAVIATE_QUERY_TIMEOUT", "30")),
            insert=int(os.getenv("WEAVIATE_INSERT_TIMEOUT", "60")),
        )
    )

    if api_key:
        logger.info(f"Connecting to Weaviate Cloud at {url}")
        client = weaviate.connect_to_weaviate_cloud(
            cluster_url=url,
            auth_credentials=Auth.api_key(api_key),
            headers=headers,
            additional_config=additional_config,
        )
    else:
        host, port = _split_host_port(url)
        logger.info(f"Connecting to Weaviate at {host}:{port}")
        client = weaviate.connect_to_local(
            host=host,
            port=port,
            grpc_port=int(os.getenv("WEAVIATE_GRPC_PORT", "50051")),
            headers=headers,
            additional_config=additional_config,
        )

    if not client.is_ready():
        client.close()
        raise RuntimeError("Weaviate is not ready")

    return client
