"""Unit tests configuration file."""

import logging

import pytest

from svcinfo import NodeType, ServiceInfo, ServicePort, ServicePortType


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def rpc_port():
    return ServicePort(ServicePortType.RPC, 9862)


@pytest.fixture
def http_port():
    return ServicePort(ServicePortType.HTTP, 9874)


@pytest.fixture
def datanode(rpc_port, http_port):
    return ServiceInfo(NodeType.DATANODE, "node-1", [rpc_port, http_port])


@pytest.fixture(autouse=True)
def reset_svcinfo_logger():
    """Undo handlers installed by the CLI so caplog sees every record."""
    yield
    root = logging.getLogger("svcinfo")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True
