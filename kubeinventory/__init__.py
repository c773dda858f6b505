"""kubeinventory: Kubernetes cluster-inventory poller.

Takes one-shot snapshots of nodes, pods, workloads and volumes from the
Kubernetes API and emits them as timestamped metric records.
"""

__version__ = "0.1.0"
