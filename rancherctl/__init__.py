"""rancherctl - bootstrap and tear down a single-node Rancher management cluster on RKE2."""

__version__ = "1.0.0"
