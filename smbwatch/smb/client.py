"""impacket-backed SMB client."""

import logging

from impacket.nmb import NetBIOSError, NetBIOSTimeout
from impacket.smbconnection import SessionError, SMBConnection

from .base import ConnectError, DirEntry, FolderReadError, MountError, SmbError

logger = logging.getLogger(__name__)

SMB_PORT = 445

_PROTOCOL_ERRORS = (SessionError, NetBIOSError, NetBIOSTimeout, OSError)


def to_smb_pattern(folder: str) -> str:
    """Convert a share-relative folder into an SMB listing pattern."""
    parts = [part for part in folder.split("/") if part]
    return "\\".join(parts + ["*"])


class SmbConnector:
    """Opens NTLM-authenticated SMB sessions."""

    def __init__(self, user: str, password: str, domain: str = "", port: int = SMB_PORT):
        self.user = user
        self.password = password
        self.domain = domain
        self.port = port

    def connect(self, address: str, timeout: float) -> "SmbSession":
        try:
            conn = SMBConnection(address, address, sess_port=self.port, timeout=timeout)
        except _PROTOCOL_ERRORS as e:
            raise ConnectError(f"unable to connect to {address}: {e}") from e

        try:
            conn.login(self.user, self.password, self.domain)
        except _PROTOCOL_ERRORS as e:
            conn.close()
            raise ConnectError(f"unable to authenticate to {address}: {e}") from e

        return SmbSession(address, conn)


class SmbSession:
    """An authenticated session against one server."""

    def __init__(self, address: str, conn: SMBConnection):
        self.address = address
        self._conn = conn

    def list_shares(self) -> list[str]:
        try:
            shares = self._conn.listShares()
        except _PROTOCOL_ERRORS as e:
            raise SmbError(f"unable to list shares: {e}") from e
        # shi1_netname is NUL terminated
        return [share["shi1_netname"][:-1] for share in shares]

    def mount(self, share: str) -> "SmbShare":
        try:
            tree_id = self._conn.connectTree(share)
        except _PROTOCOL_ERRORS as e:
            raise MountError(f"could not mount {share}: {e}") from e
        return SmbShare(self._conn, share, tree_id)

    def disconnect(self) -> None:
        try:
            self._conn.logoff()
        except _PROTOCOL_ERRORS as e:
            logger.debug("Logoff from %s failed: %s", self.address, e)
        finally:
            self._conn.close()


class SmbShare:
    """A mounted share."""

    def __init__(self, conn: SMBConnection, name: str, tree_id: int):
        self.name = name
        self._conn = conn
        self._tree_id = tree_id

    def read_directory(self, folder: str) -> list[DirEntry]:
        try:
            listing = self._conn.listPath(self.name, to_smb_pattern(folder))
        except _PROTOCOL_ERRORS as e:
            raise FolderReadError(f"could not open folder {folder or '/'}: {e}") from e

        return [
            DirEntry(
                name=item.get_longname(),
                is_directory=bool(item.is_directory()),
                size=item.get_filesize(),
                modified_at=item.get_mtime_epoch(),
                mode=item.get_attributes(),
            )
            for item in listing
            if item.get_longname() not in (".", "..")
        ]

    def unmount(self) -> None:
        try:
            self._conn.disconnectTree(self._tree_id)
        except _PROTOCOL_ERRORS as e:
            logger.debug("Unmount of %s failed: %s", self.name, e)
