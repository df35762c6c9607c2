"""Kubernetes API client bootstrap.

In a workspace pod the service account token is mounted, so in-cluster
configuration is tried first; a kubeconfig (``CHE_KUBECONFIG`` or the
default location) is the fallback for local development.
"""

from __future__ import annotations

from dataclasses import dataclass

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from loguru import logger

from cherestapis.errors import ConfigurationError
from cherestapis.settings import CheSettings


@dataclass(frozen=True)
class KubeApis:
    """The three API groups the service reads from."""

    core: client.CoreV1Api
    networking: client.NetworkingV1Api
    custom_objects: client.CustomObjectsApi


def create_api_client(settings: CheSettings) -> client.ApiClient:
    """Load cluster credentials and return a configured ``ApiClient``.

    Raises ``ConfigurationError`` when neither in-cluster nor kubeconfig
    credentials are available.
    """
    configuration = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=configuration)
        logger.info("Kubernetes: using in-cluster configuration")
    except ConfigException:
        try:
            config.load_kube_config(
                config_file=settings.kubeconfig,
                context=settings.kube_context,
                client_configuration=configuration,
            )
        except (ConfigException, OSError) as exc:
            msg = f"Kubernetes client cannot be created: {exc}"
            raise ConfigurationError(msg) from exc
        logger.info("Kubernetes: using kubeconfig (context={})", settings.kube_context or "current")
    logger.info("Kubernetes API host: {}", configuration.host)
    return client.ApiClient(configuration)


def create_kube_apis(api_client: client.ApiClient) -> KubeApis:
    return KubeApis(
        core=client.CoreV1Api(api_client),
        networking=client.NetworkingV1Api(api_client),
        custom_objects=client.CustomObjectsApi(api_client),
    )
