"""Data models for rancherctl."""
import secrets
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CertType(str, Enum):
    """Certificate source for the Rancher ingress."""
    SELF_SIGNED = 'self-signed'
    LETSENCRYPT = 'letsencrypt'


class IngressMode(str, Enum):
    """Topology of the NGINX ingress controller."""
    HOSTPORT = 'hostport'
    NODEPORT = 'nodeport'


class CapiProvider(str, Enum):
    """Infrastructure provider used to provision workload clusters."""
    K3K = 'k3k'
    VCLUSTER = 'vcluster'
    AWS = 'aws'


class ClusterState(str, Enum):
    """Phases of the RKE2 bootstrap."""
    NOT_INSTALLED = 'not-installed'
    INSTALLING = 'installing'
    WAITING_FOR_API = 'waiting-for-api'
    READY = 'ready'


def default_bootstrap_password() -> str:
    return f"CHANGEME-{secrets.token_hex(6)}"


class InstallOptions(BaseModel):
    """Options for a single install run. Immutable once parsed."""
    model_config = ConfigDict(frozen=True)

    hostname: str = "suse-ai-cluster-manager.xyz"
    bootstrap_password: str = Field(default_factory=default_bootstrap_password)
    email: str = "you@example.com"
    cert_type: CertType = CertType.SELF_SIGNED
    ingress_mode: IngressMode = IngressMode.HOSTPORT
    capi_provider: CapiProvider = CapiProvider.K3K
    force: bool = False
    dry_run: bool = False

    @field_validator('hostname', 'bootstrap_password', 'email')
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @property
    def tls_source(self) -> str:
        """Value for the Rancher chart's ``ingress.tls.source``."""
        if self.cert_type == CertType.LETSENCRYPT:
            return 'letsEncrypt'
        return 'secret'


class InstallRecord(BaseModel):
    """Contents of the install marker.

    Only host-level tools and Rancher carry an "installed by this run" flag;
    uninstall uses the flags to decide which host binaries it may remove.
    """
    installed_by: str
    version: str
    arch: str
    date: str
    rke2: bool = False
    helm: bool = False
    clusterctl: bool = False
    rancher: bool = False

    def to_lines(self) -> str:
        lines = []
        for key, value in self.model_dump().items():
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            lines.append(f"{key}={value}")
        return "\n".join(lines) + "\n"


@dataclass
class RunState:
    """What this run installed on the host."""
    rke2: bool = False
    helm: bool = False
    clusterctl: bool = False
    rancher: bool = False

    def to_record(self, installed_by: str, version: str, arch: str,
                  date: Optional[str] = None) -> InstallRecord:
        return InstallRecord(
            installed_by=installed_by,
            version=version,
            arch=arch,
            date=date or datetime.now().astimezone().isoformat(timespec='seconds'),
            rke2=self.rke2,
            helm=self.helm,
            clusterctl=self.clusterctl,
            rancher=self.rancher,
        )

    def as_dict(self) -> Dict[str, bool]:
        return {
            'rke2': self.rke2,
            'helm': self.helm,
            'clusterctl': self.clusterctl,
            'rancher': self.rancher,
        }
