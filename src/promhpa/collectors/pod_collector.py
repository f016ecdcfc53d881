# src/promhpa/collectors/pod_collector.py
"""
Lists the pods matched by a label selector from the Kubernetes API,
together with their phase and per-container resource requests.
"""

import logging
from typing import List, Mapping, Optional, Union

import aiohttp
from kubernetes_asyncio.client import CoreV1Api, V1Pod
from kubernetes_asyncio.client.exceptions import ApiException

from ..core.exceptions import PodListError
from ..core.k8s_client import get_core_v1_api
from ..models.pods import ContainerInfo, PodInfo, PodPhase
from ..utils.k8s_utils import format_label_selector, parse_milli_value

logger = logging.getLogger(__name__)

Selector = Union[str, Mapping[str, str]]


class PodCollector:
    """
    Connects to the K8s API to resolve the pod set behind a namespace and
    label selector. Phase filtering is left to the caller.
    """

    def __init__(self, api: Optional[CoreV1Api] = None):
        self._api = api

    async def _ensure_client(self) -> CoreV1Api:
        """Lazily initialize the Kubernetes Client. Raises PodListError if no configuration loads."""
        if self._api is None:
            self._api = await get_core_v1_api()
            logger.debug("PodCollector Kubernetes client initialized.")
        return self._api

    async def list_pods(self, namespace: str, selector: Optional[Selector]) -> List[PodInfo]:
        """
        Fetches the pods of `namespace` matching `selector`.

        Raises:
            PodListError: if the API call fails or a pod carries an unparseable request.
        """
        api = await self._ensure_client()
        label_selector = format_label_selector(selector)

        try:
            pod_list = await api.list_namespaced_pod(namespace, label_selector=label_selector)
        except (ApiException, aiohttp.ClientError, OSError) as e:
            raise PodListError(f"failed to get pod list: {e}") from e

        pods = [self._to_pod_info(pod, namespace) for pod in pod_list.items or []]
        logger.debug("%s %s - listed %d pod(s)", namespace, label_selector, len(pods))
        return pods

    @staticmethod
    def _to_pod_info(pod: V1Pod, namespace: str) -> PodInfo:
        containers = []
        spec_containers = pod.spec.containers if pod.spec and pod.spec.containers else []
        for container in spec_containers:
            resources = container.resources
            requests = (resources.requests if resources else None) or {}
            try:
                parsed = {name: parse_milli_value(quantity) for name, quantity in requests.items()}
            except ValueError as e:
                raise PodListError(f"pod {pod.metadata.name} container {container.name}: {e}") from e
            containers.append(ContainerInfo(name=container.name, requests=parsed))

        phase = pod.status.phase if pod.status else None
        return PodInfo(
            name=pod.metadata.name,
            namespace=pod.metadata.namespace or namespace,
            phase=PodPhase.parse(phase),
            containers=containers,
        )

    async def close(self):
        """Close the Kubernetes API client if it exists."""
        if self._api:
            await self._api.api_client.close()
            logger.debug("PodCollector Kubernetes client closed.")
            self._api = None
