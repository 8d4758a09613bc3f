# SPDX-FileCopyrightText: Copyright (c) 2023-2026, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""
Check that the current cluster is usable before installing into a namespace.

Uses the default kubeconfig ($KUBECONFIG or ~/.kube/config) unless --kubeconfig is given.

  python examples/check_cluster.py my-namespace
  python examples/check_cluster.py my-namespace --minimum 1.28
"""

import argparse
import asyncio
import sys

import kubegate
import kubegate.asyncio


##################################################################
# Blocking API
def check(namespace, kubeconfig=None, minimum=None):
    api = kubegate.api(kubeconfig=kubeconfig)
    info = api.version()
    try:
        version = api.check_version(info, minimum=minimum)
    except kubegate.UnsupportedVersionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    print(f"Server {api.auth.server} is running Kubernetes {version}")

    if not api.namespace_exists(namespace):
        print(f"ERROR: namespace {namespace} does not exist", file=sys.stderr)
        return 1
    print(f"Pods in {namespace} live at {api.url_for(namespace, '/pods')}")
    return 0


##################################################################
# The same checks with the async API
async def check_async(namespace, kubeconfig=None, minimum=None):
    api = await kubegate.asyncio.api(kubeconfig=kubeconfig)
    version = await api.check_version(minimum=minimum)
    exists = await api.namespace_exists(namespace)
    print(f"Kubernetes {version}, namespace {namespace} exists: {exists}")


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("namespace")
    parser.add_argument("--kubeconfig")
    parser.add_argument("--minimum", help="Minimum server version, e.g. 1.28")
    args = parser.parse_args()
    minimum = kubegate.parse_version(args.minimum) if args.minimum else None

    code = check(args.namespace, args.kubeconfig, minimum)
    if code == 0:
        asyncio.run(check_async(args.namespace, args.kubeconfig, minimum))
    sys.exit(code)


if __name__ == "__main__":
    main()
