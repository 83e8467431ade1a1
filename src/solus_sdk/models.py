"""Typed request and response models for the SOLUS IO API."""

from __future__ import annotations

import enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class SolusModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Credentials(SolusModel):
    access_token: str
    token_type: str = "Bearer"
    expires_at: str | None = None

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


class AuthLoginRequest(SolusModel):
    email: str
    password: str


class AuthLoginResponse(SolusModel):
    credentials: Credentials


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    DONE_WITH_ERRORS = "done_with_errors"
    FAILED = "failed"
    CANCELED = "canceled"


# Any other status, including ones the SDK does not know, is terminal.
ACTIVE_TASK_STATUSES = frozenset(
    {
        TaskStatus.PENDING.value,
        TaskStatus.QUEUED.value,
        TaskStatus.RUNNING.value,
    }
)


class TaskAction(str, enum.Enum):
    SERVER_CREATE = "vm-create"
    SERVER_REINSTALL = "vm-reinstall"
    SERVER_DELETE = "vm-delete"
    SERVER_UPDATE = "vm-update"
    SERVER_PASSWORD_CHANGE = "vm-password-change"
    SERVER_START = "vm-start"
    SERVER_STOP = "vm-stop"
    SERVER_RESTART = "vm-restart"
    SERVER_SUSPEND = "vm-suspend"
    SERVER_RESUME = "vm-resume"
    SERVER_RESIZE = "vm-resize"
    SERVERS_MIGRATE = "vms-migrate"
    SERVER_MIGRATE = "vm-migrate"
    SERVER_UPDATE_NETWORK = "vm-update-network"
    SERVER_UPDATE_LIMITS = "vm-update-limits"
    SERVERS_UPDATE_LIMITS = "vms-update-limits"
    DNS_RECORD_REGISTER = "dns-record-register"
    DNS_RECORDS_UNREGISTER = "dns-records-unregister"
    DNS_RECORDS_UPDATE = "dns-record-update"
    REVERSE_DNS_RECORD_REGISTER = "reverse-dns-record-register"
    SNAPSHOT_CREATE = "snapshot-create"
    SNAPSHOT_DELETE = "snapshot-delete"
    SNAPSHOT_REVERT = "snapshot-revert"
    PREPARE_INSTALLER_FOR_UPDATE = "prepare installer for version update"
    RUN_VERSION_UPDATE = "run version update"
    BACKUP_CREATE = "backup-create"
    BACKUP_RESTORE = "backup-restore"
    BACKUP_DELETE = "backup-delete"
    BACKUP_ROTATE = "backup-rotate"
    PURGE_COMPUTE_RESOURCE_VM = "backup-purge-compute-resource-vm"
    CONFIGURE_NETWORK = "configure network"
    UPDATE_NETWORK_RULES = "update network rules"
    UPGRADE_COMPUTE_RESOURCE = "upgrade compute resource"
    CLEAR_IMAGE_CACHE = "clear image cache"
    CHANGE_HOSTNAME = "change hostname"


class Task(SolusModel):
    """Server-side handle of a long-running operation.

    Tasks are read-only on the client; their fields only change by fetching
    the task again. Action and status values the SDK does not know about are
    kept as plain strings; an unknown status counts as finished.
    """

    id: int = 0
    compute_resource_id: int | None = None
    queue: str = ""
    action: Annotated[TaskAction | str, Field(union_mode="left_to_right")] = ""
    status: Annotated[TaskStatus | str, Field(union_mode="left_to_right")] = TaskStatus.PENDING
    output: str = ""
    progress: int = 0
    duration: int = 0

    @property
    def status_value(self) -> str:
        return self.status.value if isinstance(self.status, TaskStatus) else self.status

    @property
    def is_finished(self) -> bool:
        return self.status_value not in ACTIVE_TASK_STATUSES

    @property
    def is_successful(self) -> bool:
        return self.status_value == TaskStatus.DONE.value


class ResponseLinks(SolusModel):
    first: str | None = None
    last: str | None = None
    prev: str | None = None
    next: str | None = None


class ResponseMeta(SolusModel):
    current_page: int = 0
    from_: int | None = Field(default=None, alias="from")
    last_page: int = 0
    path: str | None = None
    per_page: int = 0
    to: int | None = None
    total: int = 0


class IconType(str, enum.Enum):
    OS = "os"
    APPLICATION = "application"
    FLAGS = "flags"


class Icon(SolusModel):
    id: int
    name: str = ""
    url: str = ""
    type: Annotated[IconType | str, Field(union_mode="left_to_right")] = ""


class ShortLocation(SolusModel):
    id: int
    name: str = ""


class ShortPlan(SolusModel):
    id: int
    name: str = ""


class ShortOsImageVersion(SolusModel):
    id: int
    name: str = ""


class ComputeResource(SolusModel):
    id: int
    name: str = ""
    host: str = ""
    agent_port: int | None = None
    status: str = ""
    vms_count: int = 0
    version: str = ""


class Location(SolusModel):
    id: int
    name: str = ""
    description: str = ""
    icon: Icon | None = None
    is_default: bool = False
    is_visible: bool = False
    compute_resources: list[ComputeResource] = Field(default_factory=list)
    available_plans: list[ShortPlan] = Field(default_factory=list)


class LocationCreateRequest(SolusModel):
    name: str
    description: str = ""
    icon_id: int | None = None
    is_default: bool = False
    is_visible: bool = False
    compute_resources: list[int] | None = None
    available_plans: list[int] | None = None


class User(SolusModel):
    id: int
    email: str = ""
    status: str = ""


class Project(SolusModel):
    id: int
    name: str = ""
    description: str = ""
    members: int = 0
    is_owner: bool = False
    is_default: bool = False
    owner: User | None = None
    servers: int = 0


class ProjectCreateRequest(SolusModel):
    name: str
    description: str = ""


class SSHKey(SolusModel):
    id: int
    name: str = ""
    body: str = ""


class SSHKeyCreateRequest(SolusModel):
    name: str
    body: str
    user_id: int | None = None


class VirtualizationType(str, enum.Enum):
    KVM = "kvm"
    VZ = "vz"


class PlanParams(SolusModel):
    disk: int = 0
    ram: int = 0
    vcpu: int = 0
    vcpu_units: int | None = None
    vcpu_limit: int | None = None
    io_priority: int | None = None


class Plan(SolusModel):
    id: int
    name: str = ""
    virtualization_type: Annotated[VirtualizationType | str, Field(union_mode="left_to_right")] = ""
    params: PlanParams = Field(default_factory=PlanParams)
    storage_type: str = ""
    image_format: str = ""
    is_default: bool = False
    is_visible: bool = False
    is_snapshots_enabled: bool = False
    is_backup_available: bool = False
    is_additional_ips_available: bool = False
    limits: dict[str, Any] = Field(default_factory=dict)
    tokens_per_hour: float = 0
    tokens_per_month: float = 0
    available_locations: list[ShortLocation] = Field(default_factory=list)
    available_os_image_versions: list[ShortOsImageVersion] = Field(default_factory=list)


class PlanCreateRequest(SolusModel):
    name: str
    virtualization_type: VirtualizationType | str = VirtualizationType.KVM
    params: PlanParams
    storage_type: str = "fb"
    image_format: str = "qcow2"
    limits: dict[str, Any] | None = None
    tokens_per_hour: float = 0
    tokens_per_month: float = 0
    is_visible: bool = False
    is_default: bool = False
    is_snapshots_enabled: bool = False
    is_backup_available: bool = False
    is_additional_ips_available: bool = False
    available_locations: list[int] | None = None
    available_os_image_versions: list[int] | None = None


class PlanUpdateRequest(SolusModel):
    name: str
    limits: dict[str, Any] | None = None
    tokens_per_hour: float = 0
    tokens_per_month: float = 0
    is_visible: bool = False
    is_default: bool = False
    is_snapshots_enabled: bool = False
    is_backup_available: bool = False
    is_additional_ips_available: bool = False


class OsImageVersion(SolusModel):
    id: int
    os_image_id: int | None = None
    version: str = ""
    url: str = ""
    position: float = 0
    virtualization_type: Annotated[VirtualizationType | str, Field(union_mode="left_to_right")] = ""
    cloud_init_version: str = ""
    is_visible: bool = False
    is_ssh_keys_supported: bool = False
    available_plans: list[ShortPlan] = Field(default_factory=list)


class OsImageVersionRequest(SolusModel):
    version: str
    url: str
    virtualization_type: VirtualizationType | str = VirtualizationType.KVM
    cloud_init_version: str | None = None
    position: float | None = None
    is_visible: bool = False
    available_plans: list[int] | None = None


class OsImage(SolusModel):
    id: int
    name: str = ""
    icon: Icon | None = None
    versions: list[OsImageVersion] = Field(default_factory=list)
    is_default: bool = False
    is_visible: bool = False
    position: float = 0


class OsImageRequest(SolusModel):
    name: str
    icon_id: int | None = None
    is_visible: bool = False


class IPVersion(str, enum.Enum):
    IPV4 = "IPv4"
    IPV6 = "IPv6"


class IPBlock(SolusModel):
    id: int
    name: str = ""
    type: Annotated[IPVersion | str, Field(union_mode="left_to_right")] = ""
    gateway: str = ""
    netmask: str = ""
    ns_1: str = ""
    ns_2: str = ""
    from_: str = Field(default="", alias="from")
    to: str = ""
    range: str = ""
    subnet: int | None = None
    compute_resources: list[ComputeResource] = Field(default_factory=list)


class IPBlockCreateRequest(SolusModel):
    name: str
    type: IPVersion
    gateway: str
    ns_1: str = ""
    ns_2: str = ""
    compute_resources: list[int] | None = None
    netmask: str | None = None
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    range: str | None = None
    subnet: int | None = None


class IPBlockIPAddress(SolusModel):
    id: int
    ip: str = ""


class VirtualServerStatus(str, enum.Enum):
    NOT_EXISTS = "not exists"
    PROCESSING = "processing"
    STARTED = "started"
    STOPPED = "stopped"
    PAUSED = "paused"
    UNAVAILABLE = "unavailable"


class BootMode(str, enum.Enum):
    DISK = "disk"
    RESCUE = "rescue"


class VirtualServerSpecifications(SolusModel):
    disk: int = 0
    ram: int = 0
    vcpu: int = 0


class VirtualServer(SolusModel):
    id: int
    name: str = ""
    description: str = ""
    uuid: str = ""
    virtualization_type: Annotated[VirtualizationType | str, Field(union_mode="left_to_right")] = ""
    specifications: VirtualServerSpecifications = Field(default_factory=VirtualServerSpecifications)
    status: Annotated[VirtualServerStatus | str, Field(union_mode="left_to_right")] = ""
    ips: list[IPBlockIPAddress] = Field(default_factory=list)
    location: ShortLocation | None = None
    plan: ShortPlan | None = None
    fqdns: list[str] = Field(default_factory=list)
    boot_mode: Annotated[BootMode | str, Field(union_mode="left_to_right")] = BootMode.DISK
    is_suspended: bool = False
    is_processing: bool = False
    project: Project | None = None
    ssh_keys: list[SSHKey] = Field(default_factory=list)
    created_at: str | None = None


class VirtualServerCreateRequest(SolusModel):
    name: str
    plan: int
    project: int
    location: int
    boot_mode: BootMode = BootMode.DISK
    os: int | None = None
    application: int | None = None
    application_data: dict[str, Any] | None = Field(default=None, alias="applicationData")
    description: str | None = None
    user_data: str | None = None
    fqdns: list[str] | None = None
    password: str | None = None
    ssh_keys: list[int] = Field(default_factory=list)


class VirtualServerUpdateRequest(SolusModel):
    name: str | None = None
    boot_mode: BootMode | None = None
    description: str | None = None
    user_data: str | None = None
    fqdns: list[str] | None = None


class VirtualServerResizeRequest(SolusModel):
    plan_id: int
    preserve_disk: bool = False
