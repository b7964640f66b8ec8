from __future__ import annotations
import typing as t
from urllib.parse import urlparse

import zirconium as zr
import zrlog
from autoinject import injector
from azure.identity import DefaultAzureCredential
from azure.storage.fileshare import ShareClient

from azfile.exc import AzFileError
from azfile.util import HaltFlag
from .azure_files import AzureFileStorage
from .backend import ShareBackend


FILE_DOMAIN_SUFFIX = ".file.core.windows.net"


def share_from_config(config) -> dict:
    """Resolve the share settings from the [azfile] section of the configuration."""
    share_url = config.as_str(("azfile", "share_url"), default=None)
    account_name = config.as_str(("azfile", "account_name"), default=None)
    share_name = config.as_str(("azfile", "share_name"), default=None)
    if share_url:
        url_parts = urlparse(share_url)
        domain = url_parts.hostname or ""
        if not domain.endswith(FILE_DOMAIN_SUFFIX):
            raise AzFileError(f"Invalid hostname [{domain}]", "AZFILE", 1001)
        path_parts = [x for x in url_parts.path.strip('/').split('/') if x]
        if not path_parts:
            raise AzFileError(f"Missing share name", "AZFILE", 1002)
        account_name = domain[:-len(FILE_DOMAIN_SUFFIX)]
        share_name = path_parts[0]
    elif not (account_name and share_name):
        raise AzFileError(f"Either share_url or both account_name and share_name must be configured", "AZFILE", 1003)
    return {
        "account_name": account_name,
        "share_name": share_name,
        "share_url": f"https://{account_name}{FILE_DOMAIN_SUFFIX}/{share_name}",
        "connection_string": config.as_str(("azure", "storage", account_name, "connection_string"), default=None),
        "work_dir": config.as_str(("azfile", "work_dir"), default="/"),
    }


@injector.injectable_global
class StorageController:
    """Builds AzureFileStorage instances from the application configuration."""

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self):
        self._log = zrlog.get_logger("azfile.controller")

    def get_storage(self, work_dir: t.Optional[str] = None, halt_flag: HaltFlag = None) -> AzureFileStorage:
        details = share_from_config(self.config)
        if work_dir is not None:
            details["work_dir"] = work_dir
        self._log.debug(f"Opening share [{details['share_url']}] in [{details['work_dir']}]")
        return AzureFileStorage(
            ShareBackend(self.share_client(details)),
            work_dir=details["work_dir"],
            halt_flag=halt_flag
        )

    @staticmethod
    def share_client(details: dict) -> ShareClient:
        try:
            if details["connection_string"]:
                return ShareClient.from_connection_string(
                    conn_str=details["connection_string"],
                    share_name=details["share_name"]
                )
            return ShareClient.from_share_url(
                details["share_url"],
                credential=DefaultAzureCredential(),
                token_intent="backup"
            )
        except ValueError as ex:
            raise AzFileError(f"Could not create share client", "AZFILE", 1000) from ex
