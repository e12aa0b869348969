import logging
from typing import Any, Dict, List

from kubeapi.client import ApiClient
from kubeapi.model.api_group import ApiGroup, CoreV1
from kubeapi.model.api_resource import DynamicResource

logger = logging.getLogger("discovery")


def parse_api_groups(value: Any) -> List[ApiGroup]:
    api_groups = []

    for item in value["groups"]:
        preferred = (item.get("preferredVersion") or {}).get("version")

        for version_dct in item["versions"]:
            api_group = ApiGroup(
                group=item["name"],
                version=version_dct["version"],
                preferred=version_dct["version"] == preferred,
            )
            api_groups.append(api_group)

    return api_groups


def parse_api_resources(group: ApiGroup, value: Any) -> List[DynamicResource]:
    api_resources = []

    for item in value["resources"]:
        name = item["name"]

        # subresources like pods/log
        if "/" in name:
            continue

        api_resource = DynamicResource(
            group=group,
            kind=item["kind"],
            name=name,
            singular=item.get("singularName"),
            namespaced=item["namespaced"],
            verbs=item.get("verbs"),
        )
        api_resources.append(api_resource)

    return api_resources


async def list_api_groups(api_client: ApiClient) -> List[ApiGroup]:
    "The core group followed by one ApiGroup per version of every named group"

    logger.info("Listing api groups on %s", api_client.base_url)
    response = await api_client.get_path("/apis", parse_api_groups)

    api_groups = [CoreV1] + response.body

    logger.debug("Returning %s api groups", len(api_groups))
    return api_groups


async def list_api_resources(
    api_client: ApiClient, group: ApiGroup
) -> List[DynamicResource]:
    logger.info("Listing %s api resources on %s", group.name, group.endpoint)
    response = await api_client.get_path(
        group.endpoint, lambda value: parse_api_resources(group, value)
    )

    logger.debug("Returning %s %s api resources", len(response.body), group.name)
    return response.body


async def list_all_resources(api_client: ApiClient) -> List[DynamicResource]:
    """
    Every resource of the preferred version of every group. When a name is
    served by several groups (events in core and events.k8s.io) the first
    group wins, which makes core take precedence.
    """

    resources: Dict[str, DynamicResource] = {}

    for group in await list_api_groups(api_client):
        if not group.preferred:
            continue

        for res in await list_api_resources(api_client, group):
            resources.setdefault(res.name, res)

    return list(resources.values())
