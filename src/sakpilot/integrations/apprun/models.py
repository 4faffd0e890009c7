"""AppRun dedicated display models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, format_timestamp, str_id, to_bool, to_int, to_str_list


class Cluster(ViewModel):
    """AppRun dedicated cluster."""

    id: str
    name: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Cluster:
        return cls(id=str_id(item.get("clusterId")), name=item.get("name") or "")


class Application(ViewModel):
    """Application deployed on a cluster.

    ``active_version`` is 0 when no version is active.
    """

    id: str
    cluster_id: str = ""
    name: str = ""
    active_version: int = 0

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Application:
        return cls(
            id=str_id(item.get("applicationId")),
            cluster_id=str_id(item.get("clusterId")),
            name=item.get("name") or "",
            active_version=to_int(item.get("activeVersion")),
        )


class ApplicationVersion(ViewModel):
    """Version listing entry."""

    version: int = 0
    image: str = ""
    active_node_count: int = 0
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ApplicationVersion:
        return cls(
            version=to_int(item.get("version")),
            image=item.get("image") or "",
            active_node_count=to_int(item.get("activeNodeCount")),
            created_at=format_timestamp(item.get("created")),
        )


class ExposedPort(ViewModel):
    """Port exposed through the cluster load balancer."""

    target_port: int = 0
    load_balancer_port: int = 0
    use_lets_encrypt: bool = False
    hosts: list[str] = Field(default_factory=list)


class EnvVar(ViewModel):
    """Environment variable of a version; secret values are not returned upstream."""

    key: str = ""
    value: str = ""
    secret: bool = False


class ApplicationVersionDetail(ViewModel):
    """Full definition of one application version."""

    version: int = 0
    cpu: int = 0
    memory: int = 0
    scaling_mode: str = ""
    fixed_scale: int = 0
    min_scale: int = 0
    max_scale: int = 0
    scale_in_threshold: int = 0
    scale_out_threshold: int = 0
    image: str = ""
    cmd: list[str] = Field(default_factory=list)
    active_node_count: int = 0
    created_at: str = ""
    exposed_ports: list[ExposedPort] = Field(default_factory=list)
    env: list[EnvVar] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ApplicationVersionDetail:
        exposed_ports = [
            ExposedPort(
                target_port=to_int(p.get("targetPort")),
                load_balancer_port=to_int(p.get("loadBalancerPort")),
                use_lets_encrypt=to_bool(p.get("useLetsEncrypt")),
                hosts=to_str_list(p.get("host")),
            )
            for p in item.get("exposedPorts") or []
        ]
        env = [
            EnvVar(
                key=e.get("key") or "",
                value=e.get("value") or "",
                secret=to_bool(e.get("secret")),
            )
            for e in item.get("env") or []
        ]
        return cls(
            version=to_int(item.get("version")),
            cpu=to_int(item.get("cpu")),
            memory=to_int(item.get("memory")),
            scaling_mode=item.get("scalingMode") or "",
            fixed_scale=to_int(item.get("fixedScale")),
            min_scale=to_int(item.get("minScale")),
            max_scale=to_int(item.get("maxScale")),
            scale_in_threshold=to_int(item.get("scaleInThreshold")),
            scale_out_threshold=to_int(item.get("scaleOutThreshold")),
            image=item.get("image") or "",
            cmd=to_str_list(item.get("cmd")),
            active_node_count=to_int(item.get("activeNodeCount")),
            created_at=format_timestamp(item.get("created")),
            exposed_ports=exposed_ports,
            env=env,
        )


class ASGInterface(ViewModel):
    index: int = 0
    upstream: str = ""


class AutoScalingGroup(ViewModel):
    """Auto-scaling group of worker nodes."""

    id: str
    name: str = ""
    zone: str = ""
    min_nodes: int = 0
    max_nodes: int = 0
    worker_node_count: int = 0
    interfaces: list[ASGInterface] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> AutoScalingGroup:
        return cls(
            id=str_id(item.get("autoScalingGroupId")),
            name=item.get("name") or "",
            zone=item.get("zone") or "",
            min_nodes=to_int(item.get("minNodes")),
            max_nodes=to_int(item.get("maxNodes")),
            worker_node_count=to_int(item.get("workerNodeCount")),
            interfaces=[
                ASGInterface(
                    index=to_int(i.get("interfaceIndex")), upstream=i.get("upstream") or ""
                )
                for i in item.get("interfaces") or []
            ],
        )


class LoadBalancer(ViewModel):
    id: str
    name: str = ""
    service_class_path: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> LoadBalancer:
        return cls(
            id=str_id(item.get("loadBalancerId")),
            name=item.get("name") or "",
            service_class_path=item.get("serviceClassPath") or "",
        )


class NodeInterface(ViewModel):
    """Network interface of a worker or load balancer node."""

    index: int = 0
    addresses: list[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> NodeInterface:
        return cls(
            index=to_int(item.get("interfaceIndex")),
            addresses=to_str_list([a.get("address") for a in item.get("addresses") or []]),
        )


class WorkerNode(ViewModel):
    id: str
    status: str = ""
    draining: bool = False
    interfaces: list[NodeInterface] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> WorkerNode:
        return cls(
            id=str_id(item.get("workerNodeId")),
            status=item.get("status") or "",
            draining=to_bool(item.get("draining")),
            interfaces=[NodeInterface.from_api(i) for i in item.get("networkInterfaces") or []],
        )


class LoadBalancerNode(ViewModel):
    id: str
    status: str = ""
    interfaces: list[NodeInterface] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> LoadBalancerNode:
        return cls(
            id=str_id(item.get("loadBalancerNodeId")),
            status=item.get("status") or "",
            interfaces=[NodeInterface.from_api(i) for i in item.get("interfaces") or []],
        )
