"""In-cluster components installed with Helm.

cert-manager, the NGINX ingress controller, Rancher and Cluster API
(Rancher Turtles plus a workload-cluster provider), in dependency order.
"""
import logging
from typing import List, Tuple, Union

from ..config import Config
from ..errors import CommandError, ConfigurationError, ReadinessTimeoutError
from ..models import CapiProvider, InstallOptions, IngressMode, RunState
from .steps import Step

logger = logging.getLogger("rancherctl.components")

RANCHER_READY_REPLICAS = 3

REPOS = {
    "jetstack": "https://charts.jetstack.io",
    "ingress-nginx": "https://kubernetes.github.io/ingress-nginx",
    "rancher-latest": "https://releases.rancher.com/server-charts/latest",
    "turtles": "https://rancher.github.io/turtles",
    "k3k": "https://rancher.github.io/k3k",
}

INGRESS_COMMON_VALUES = [
    "controller.admissionWebhooks.enabled=false",
    "controller.ingressClassResource.name=nginx",
    "controller.ingressClass=nginx",
]


def ingress_values(mode: Union[str, IngressMode]) -> Tuple[List[str], str]:
    """Return the chart values and rollout target for an ingress mode.

    Raises:
        ConfigurationError: If mode is neither hostport nor nodeport
    """
    try:
        mode = IngressMode(mode)
    except ValueError:
        raise ConfigurationError(
            f"Invalid ingress mode: {mode}. Use hostport or nodeport."
        ) from None

    if mode == IngressMode.HOSTPORT:
        values = [
            "controller.kind=DaemonSet",
            "controller.hostNetwork=true",
            "controller.daemonset.useHostPort=true",
            "controller.service.type=ClusterIP",
        ]
        target = "daemonset/nginx-ingress-nginx-controller"
    else:
        values = ["controller.service.type=NodePort"]
        target = "deployment/nginx-ingress-nginx-controller"
    return values + INGRESS_COMMON_VALUES, target


def set_flags(values: List[str], flag: str = "--set") -> List[str]:
    flags = []
    for value in values:
        flags += [flag, value]
    return flags


def helm_escape(value: str) -> str:
    """Escape a value for ``helm --set``, which splits on unescaped commas."""
    return value.replace("\\", "\\\\").replace(",", "\\,")


class ComponentInstaller:
    """Builds the ordered in-cluster install steps for one run."""

    def __init__(self, host, probe, options: InstallOptions, state: RunState):
        self.host = host
        self.probe = probe
        self.options = options
        self.state = state
        # validated before any command runs
        self.ingress_values, self.ingress_target = ingress_values(options.ingress_mode)

    # helpers

    def helm_repo(self, name: str) -> None:
        self.host.run(["helm", "repo", "add", name, REPOS[name]])
        self.host.run(["helm", "repo", "update"])

    def helm_install(self, release: str, chart: str, namespace: str, *extra: str) -> None:
        self.host.run([
            "helm", "upgrade", "--install", release, chart,
            "--namespace", namespace, "--create-namespace",
            *extra,
        ])

    def rollout(self, target: str, namespace: str, timeout: str = Config.ROLLOUT_TIMEOUT) -> None:
        try:
            self.host.run([
                "kubectl", "rollout", "status", target,
                "-n", namespace, f"--timeout={timeout}",
            ])
        except CommandError as e:
            raise ReadinessTimeoutError(
                f"{target} in {namespace} did not become ready within {timeout}.",
                hint=f"Inspect it with: kubectl -n {namespace} describe {target}",
            ) from e

    # cert-manager

    def cert_manager_present(self) -> bool:
        return self.probe.namespace_exists("cert-manager")

    def install_cert_manager(self) -> None:
        self.helm_repo("jetstack")
        self.helm_install(
            "cert-manager", "jetstack/cert-manager", "cert-manager",
            "--version", Config.CERT_MANAGER_VERSION,
            "--set", "installCRDs=true",
        )

    def wait_cert_manager(self) -> None:
        self.rollout("deploy/cert-manager", "cert-manager")
        self.rollout("deploy/cert-manager-webhook", "cert-manager")

    # ingress

    def ingress_present(self) -> bool:
        return self.probe.pods_running("ingress-nginx", "app.kubernetes.io/name=ingress-nginx")

    def install_ingress(self) -> None:
        self.helm_repo("ingress-nginx")
        self.helm_install(
            "nginx", "ingress-nginx/ingress-nginx", "ingress-nginx",
            *set_flags(self.ingress_values),
        )

    def wait_ingress(self) -> None:
        logger.info("Waiting for NGINX ingress controller pods to be ready...")
        self.rollout(self.ingress_target, "ingress-nginx")

    # rancher

    def rancher_present(self) -> bool:
        replicas = self.probe.deployment_available_replicas("cattle-system", "rancher")
        if replicas is not None:
            if replicas >= RANCHER_READY_REPLICAS:
                return True
            logger.info(f"Rancher deployment exists but is not ready ({replicas} available).")
        elif self.probe.namespace_exists("cattle-system"):
            logger.info("cattle-system namespace exists but Rancher is not fully deployed.")
        return False

    def rancher_values(self) -> List[str]:
        return [
            f"replicas={RANCHER_READY_REPLICAS}",
            f"ingress.tls.source={self.options.tls_source}",
            "ingress.ingressClassName=nginx",
        ]

    def rancher_string_values(self) -> List[str]:
        """User-supplied values, passed verbatim as strings."""
        values = [
            f"hostname={helm_escape(self.options.hostname)}",
            f"bootstrapPassword={helm_escape(self.options.bootstrap_password)}",
        ]
        if self.options.tls_source == "letsEncrypt":
            values.append(f"letsEncrypt.email={helm_escape(self.options.email)}")
        return values

    def install_rancher(self) -> None:
        self.helm_repo("rancher-latest")
        self.helm_install(
            "rancher", "rancher-latest/rancher", "cattle-system",
            *set_flags(self.rancher_values()),
            *set_flags(self.rancher_string_values(), flag="--set-string"),
        )

    def wait_rancher(self) -> None:
        self.rollout("deploy/rancher", "cattle-system", Config.RANCHER_ROLLOUT_TIMEOUT)
        self.state.rancher = True

    # cluster api

    def capi_present(self) -> bool:
        return self.probe.namespace_exists("rancher-turtles-system")

    def install_capi(self) -> None:
        self.helm_repo("turtles")
        self.helm_install(
            "rancher-turtles", "turtles/rancher-turtles", "rancher-turtles-system",
            "--version", Config.TURTLES_VERSION,
            "--dependency-update", "--wait", "--timeout", Config.ROLLOUT_TIMEOUT,
        )

    def wait_capi(self) -> None:
        self.rollout("deploy/rancher-turtles-cluster-api-operator", "rancher-turtles-system")
        self.rollout("deploy/rancher-turtles-controller-manager", "rancher-turtles-system")

    def install_k3k(self) -> None:
        self.helm_repo("k3k")
        self.helm_install("k3k", "k3k/k3k", "k3k-system", "--devel")

    def init_vcluster(self) -> None:
        self.host.run(["clusterctl", "init", "--infrastructure", "vcluster"])

    def provider_steps(self) -> List[Step]:
        provider = self.options.capi_provider
        if provider == CapiProvider.K3K:
            # k3k has no CAPI provider yet; the k3k chart is installed directly.
            return [Step("k3k", lambda: self.probe.namespace_exists("k3k-system"), self.install_k3k)]
        if provider == CapiProvider.VCLUSTER:
            return [Step("capi-provider-vcluster", lambda: False, self.init_vcluster,
                         description="vcluster CAPI provider")]
        logger.warning(f"CAPI Provider not supported yet: {provider.value}")
        return []

    def steps(self) -> List[Step]:
        capi = Step("capi", self.capi_present, self.install_capi, self.wait_capi,
                    description="CAPI", followups=self.provider_steps())
        return [
            Step("cert-manager", self.cert_manager_present, self.install_cert_manager,
                 self.wait_cert_manager),
            Step("ingress-nginx", self.ingress_present, self.install_ingress,
                 self.wait_ingress, description="NGINX Ingress"),
            Step("rancher", self.rancher_present, self.install_rancher, self.wait_rancher,
                 description="Rancher"),
            capi,
        ]
