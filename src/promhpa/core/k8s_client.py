# src/promhpa/core/k8s_client.py
"""
Kubernetes API access for pod listing.

The client configuration is loaded once per process: from the pod's service
account when running inside the cluster, from the local kubeconfig otherwise.
A process without either cannot list pods, so the failure is raised as a
PodListError carrying the loader's error.
"""

import asyncio
import logging
import weakref
from typing import Optional

from kubernetes_asyncio import client, config

from .exceptions import PodListError

logger = logging.getLogger(__name__)

IN_CLUSTER = "in-cluster"
KUBECONFIG = "kubeconfig"

# Where the configuration came from, once loaded
_loaded_from: Optional[str] = None
# One lock per event loop; an asyncio.Lock must not outlive the loop it serves
_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def _load_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _locks.get(loop)
    if lock is None:
        lock = _locks[loop] = asyncio.Lock()
    return lock


async def load_k8s_config() -> str:
    """
    Load the Kubernetes client configuration if it is not loaded yet.

    Returns:
        str: the source of the configuration, IN_CLUSTER or KUBECONFIG.

    Raises:
        PodListError: if neither source yields a usable configuration.
    """
    global _loaded_from

    if _loaded_from:
        return _loaded_from

    async with _load_lock():
        if _loaded_from:
            return _loaded_from

        try:
            config.load_incluster_config()
        except config.ConfigException as e:
            logger.debug("Not running inside a cluster: %s", e)
        else:
            _loaded_from = IN_CLUSTER
            logger.info("Listing pods with the in-cluster service account.")
            return _loaded_from

        try:
            await config.load_kube_config()
        except (config.ConfigException, FileNotFoundError) as e:
            raise PodListError(f"failed to get pod list: no Kubernetes configuration available: {e}") from e

        _loaded_from = KUBECONFIG
        logger.info("Listing pods with the local kubeconfig.")
        return _loaded_from


async def get_core_v1_api() -> client.CoreV1Api:
    """Return a CoreV1Api for listing pods, loading the configuration on first use."""
    await load_k8s_config()
    return client.CoreV1Api()
