import json
import logging
import os
import subprocess
from datetime import datetime, timedelta
from typing import Dict, Optional

import humanize
from aiohttp import BasicAuth
from dateutil.parser import parse as parse_date

from kubeapi.config import Context, ExecConfig
from kubeapi.tools.timekeeping import date_now


class AuthContainer:
    def __init__(
        self, *, headers: Dict[str, str], expiry_date: Optional[datetime] = None
    ) -> None:
        self.headers = headers
        self.expiry_date = expiry_date

    def has_expired(self) -> bool:
        if self.expiry_date is None:
            return False

        # Trigger a refresh a few minutes before the deadline to account for
        # clock skew. Otherwise we assume the credentials are still good but
        # they may be considered expired by the API server.
        return date_now() >= (self.expiry_date - timedelta(minutes=5))


class AuthProvider:
    """
    Produces the Authorization header for a context's user: basic auth, a
    static bearer token or a token obtained from an exec credential plugin.
    Client certificates are handled by the ssl context instead.
    """

    def __init__(self, context: Context, logger=None) -> None:
        self.context = context
        self.logger = logger or logging.getLogger("auth")

        self.container: Optional[AuthContainer] = None  # lazy attribute

    def run_exec(self, cmd: ExecConfig) -> AuthContainer:
        args = [cmd.command] + cmd.args

        environ = dict(os.environ)
        environ.update(cmd.env)

        proc = subprocess.Popen(
            args=args,
            env=environ,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )

        stdout_bytes, stderr_bytes = proc.communicate()
        stdout, stderr = stdout_bytes.decode(), stderr_bytes.decode()

        if proc.returncode != 0:
            self.logger.error(
                "Failed to obtain exec credentials:"
                "\nexit_code: %s\nstdout: <<<%s>>>\nstderr: <<<%s>>>",
                proc.returncode,
                stdout.strip(),
                stderr.strip(),
            )
            return AuthContainer(headers={})

        doc = json.loads(stdout)

        status = doc.get("status") or {}
        token = status.get("token")
        expiration_timestamp = status.get("expirationTimestamp")

        expiry_date = None
        if expiration_timestamp:
            expiry_date = parse_date(expiration_timestamp)
            time_left = humanize.naturaldelta(expiry_date - date_now())

            self.logger.info(
                "[%s] Successfully obtained exec credentials valid until: %s, "
                "will expire in: %s",
                self.context.short_name,
                expiry_date,
                time_left,
            )

        if not token:
            self.logger.error(
                "[%s] Exec credentials did not contain a token",
                self.context.short_name,
            )
            return AuthContainer(headers={})

        return AuthContainer(
            headers={"Authorization": f"Bearer {token}"}, expiry_date=expiry_date
        )

    def create_container(self) -> AuthContainer:
        user = self.context.user

        if user.username and user.password:
            auth = BasicAuth(login=user.username, password=user.password)
            return AuthContainer(headers={"Authorization": auth.encode()})

        elif user.token:
            return AuthContainer(headers={"Authorization": f"Bearer {user.token}"})

        elif user.exec:
            return self.run_exec(user.exec)

        return AuthContainer(headers={})

    def get_headers(self) -> Dict[str, str]:
        if self.container is None or self.container.has_expired():
            self.container = self.create_container()

        return self.container.headers
