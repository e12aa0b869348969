import base64
import fnmatch
import logging
import os
import ssl
import tempfile
from ssl import SSLContext, create_default_context
from typing import Dict, List, Optional, Sequence

import yaml

from kubeapi.errors import ConfigError


def disp_secret_string(input: Optional[str]) -> str:
    return "SET" if input is not None else "UNSET"


def disp_secret_blob(input: Optional[str]) -> Optional[str]:
    return "[%s bytes]" % len(input) if input is not None else None


class ExecConfig:
    "A credential plugin, run to obtain a short lived token"

    def __init__(
        self,
        *,
        command: str,
        args: Optional[List[str]] = None,
        env: Optional[Dict[str, str]] = None,
        api_version: Optional[str] = None,
    ) -> None:
        self.command = command
        self.args = args or []
        self.env = env or {}
        self.api_version = api_version

    def __repr__(self) -> str:
        return "<%s command=%r, args=%r, api_version=%r>" % (
            self.__class__.__name__,
            self.command,
            self.args,
            self.api_version,
        )


class User:
    def __init__(
        self,
        *,
        name: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        token: Optional[str] = None,
        client_cert_path: Optional[str] = None,
        client_key_path: Optional[str] = None,
        client_cert_data: Optional[str] = None,
        client_key_data: Optional[str] = None,
        exec: Optional[ExecConfig] = None,
    ) -> None:
        self.name = name
        self.username = username
        self.password = password
        self.token = token
        self.client_cert_path = client_cert_path
        self.client_key_path = client_key_path
        self.client_cert_data = client_cert_data
        self.client_key_data = client_key_data
        self.exec = exec

        # host.company.com -> host
        self.short_name = name.split(".")[0]

    def __repr__(self) -> str:
        return (
            "<%s name=%r, username=%r, password=%s, token=%s, "
            "client_cert_path=%r, client_key_path=%r, "
            "client_cert_data=%s, client_key_data=%s, exec=%r>"
        ) % (
            self.__class__.__name__,
            self.name,
            self.username,
            disp_secret_string(self.password),
            disp_secret_string(self.token),
            self.client_cert_path,
            self.client_key_path,
            disp_secret_blob(self.client_cert_data),
            disp_secret_blob(self.client_key_data),
            self.exec,
        )


class Cluster:
    def __init__(
        self,
        *,
        name: str,
        server: str,
        ca_cert_path: Optional[str] = None,
        ca_cert_data: Optional[str] = None,
        insecure_skip_tls_verify: bool = False,
    ) -> None:
        self.name = name
        self.server = server
        self.ca_cert_path = ca_cert_path
        self.ca_cert_data = ca_cert_data
        self.insecure_skip_tls_verify = insecure_skip_tls_verify

        # host.company.com -> host
        self.short_name = name.split(".")[0]

    def __repr__(self) -> str:
        return "<%s name=%r, server=%r, ca_cert_path=%r, ca_cert_data=%s>" % (
            self.__class__.__name__,
            self.name,
            self.server,
            self.ca_cert_path,
            disp_secret_blob(self.ca_cert_data),
        )


class Context:
    def __init__(
        self,
        *,
        name: str,
        user: User,
        cluster: Cluster,
        namespace: Optional[str] = None,
    ) -> None:
        self.name = name
        self.user = user
        self.cluster = cluster
        self.namespace = namespace
        self.file: Optional["KubeConfigFile"] = None

        # host.company.com -> host
        self.short_name = name.split(".")[0]

    def __repr__(self) -> str:
        return "<%s name=%r, short_name=%r, user=%r, cluster=%r, namespace=%r>" % (
            self.__class__.__name__,
            self.name,
            self.short_name,
            self.user,
            self.cluster,
            self.namespace,
        )

    def set_file(self, file: "KubeConfigFile") -> None:
        self.file = file

    def create_ssl_context(self) -> SSLContext:
        kwargs = {}

        if self.cluster.ca_cert_path:
            kwargs["cafile"] = self.cluster.ca_cert_path

        elif self.cluster.ca_cert_data:
            value = base64.b64decode(self.cluster.ca_cert_data)
            cert_data = value.decode()
            kwargs["cadata"] = cert_data

        ssl_context = create_default_context(**kwargs)

        if self.cluster.insecure_skip_tls_verify:
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE

        # The ssl lib only loads client certs from file paths, so blobs are
        # written to temp files inside a tempdir that only the current user
        # can list. Both are removed when the context manager exits.
        if self.user.client_cert_data and self.user.client_key_data:
            with tempfile.TemporaryDirectory(prefix="kubeapi.") as tempdir_name:
                cert_content = base64.b64decode(self.user.client_cert_data)
                cert_file_fd, cert_file_name = tempfile.mkstemp(dir=tempdir_name)
                os.write(cert_file_fd, cert_content)
                os.close(cert_file_fd)

                key_content = base64.b64decode(self.user.client_key_data)
                key_file_fd, key_file_name = tempfile.mkstemp(dir=tempdir_name)
                os.write(key_file_fd, key_content)
                os.close(key_file_fd)

                ssl_context.load_cert_chain(
                    certfile=cert_file_name,
                    keyfile=key_file_name,
                )

        elif self.user.client_cert_path and self.user.client_key_path:
            ssl_context.load_cert_chain(
                certfile=self.user.client_cert_path,
                keyfile=self.user.client_key_path,
            )

        return ssl_context


class KubeConfigFile:
    def __init__(
        self,
        *,
        filepath: str,
        contexts: Sequence[Context],
        users: Sequence[User],
        clusters: Sequence[Cluster],
        current_context: Optional[str] = None,
        mtime: Optional[float] = None,
    ) -> None:
        self.filepath = filepath
        self.contexts = contexts or []
        self.users = users or []
        self.clusters = clusters or []
        self.current_context = current_context
        self.mtime = mtime

    def __repr__(self) -> str:
        return "<%s filepath=%r, current_context=%r, contexts=%r>" % (
            self.__class__.__name__,
            self.filepath,
            self.current_context,
            self.contexts,
        )


class KubeConfigCollection:
    def __init__(self) -> None:
        self.clusters: Dict[str, Cluster] = {}
        self.contexts: Dict[str, Context] = {}
        self.users: Dict[str, User] = {}
        self.current_context_name: Optional[str] = None

    def add_file(self, config_file: KubeConfigFile) -> None:
        # NOTE: does not enforce uniqueness of context/user/cluster names

        for cluster in config_file.clusters:
            self.clusters[cluster.name] = cluster

        for context in config_file.contexts:
            self.contexts[context.name] = context

        for user in config_file.users:
            self.users[user.name] = user

        # the first file to set it wins, like kubectl
        if self.current_context_name is None:
            self.current_context_name = config_file.current_context

    def get_context_names(self) -> Sequence[str]:
        names = list(self.contexts.keys())
        names.sort()
        return names

    def get_context(self, name) -> Optional[Context]:
        return self.contexts.get(name)

    def get_current_context(self) -> Context:
        if self.current_context_name is None:
            raise ConfigError("No current-context set in any kube config")

        context = self.get_context(self.current_context_name)
        if context is None:
            raise ConfigError(
                "current-context %r not found in any kube config"
                % self.current_context_name
            )

        return context


class KubeConfigSelector:
    def __init__(self, *, collection: KubeConfigCollection) -> None:
        self.collection = collection

    def fnmatch_context(self, pattern: str) -> List[Context]:
        names = self.collection.get_context_names()
        names = fnmatch.filter(names, pattern)
        objs = [self.collection.get_context(name) for name in names]
        contexts = [ctx for ctx in objs if ctx]
        return contexts


class KubeConfigLoader:
    def __init__(
        self, *, config_dir="$HOME/.kube", config_var="KUBECONFIG", logger=None
    ) -> None:
        self.config_dir = config_dir
        self.config_var = config_var
        self.logger = logger or logging.getLogger("config-loader")

    def get_candidate_files(self) -> Sequence[str]:
        # use config_var if set
        env_var = os.getenv(self.config_var)
        if env_var:
            filepaths = env_var.split(":")
            filepaths = [fp.strip() for fp in filepaths if fp.strip()]
            return filepaths

        # fall back on config_dir
        path = os.path.expandvars(self.config_dir)
        if not os.path.isdir(path):
            self.logger.warning("Kube config dir does not exist: %s", path)
            return []

        filepaths = []
        for fn in sorted(os.listdir(path)):
            fp = os.path.join(path, fn)
            if not os.path.isfile(fp):
                continue

            filepaths.append(fp)

        return filepaths

    def take_after_last_slash(self, name: Optional[str]) -> Optional[str]:
        # arn:aws:iam::123:role/myrole -> myrole
        if name and "/" in name:
            name = name.rsplit("/", 1)[1]

        return name

    def parse_context(
        self, clusters: Sequence[Cluster], users: Sequence[User], dct
    ) -> Optional[Context]:
        name = self.take_after_last_slash(dct.get("name"))

        obj = dct.get("context") or {}
        cluster_id = self.take_after_last_slash(obj.get("cluster"))
        user_id = self.take_after_last_slash(obj.get("user"))
        namespace = obj.get("namespace")

        # 'name', 'cluster' and 'user' are required attributes
        if not all((name, cluster_id, user_id)):
            return None

        matching_users = [user for user in users if user.name == user_id]
        if not matching_users:
            self.logger.warning(
                "When parsing context %r could not find matching user %r",
                name,
                user_id,
            )

        matching_clusters = [clus for clus in clusters if clus.name == cluster_id]
        if not matching_clusters:
            self.logger.warning(
                "When parsing context %r could not find matching cluster %r",
                name,
                cluster_id,
            )

        if matching_users and matching_clusters:
            return Context(
                name=name,
                user=matching_users[0],
                cluster=matching_clusters[0],
                namespace=namespace,
            )

        return None

    def parse_cluster(self, dct) -> Optional[Cluster]:
        name = self.take_after_last_slash(dct.get("name"))

        obj = dct.get("cluster") or {}
        server = obj.get("server")

        # 'name' and 'server' are required attributes
        if name and server:
            return Cluster(
                name=name,
                server=server,
                ca_cert_path=obj.get("certificate-authority"),
                ca_cert_data=obj.get("certificate-authority-data"),
                insecure_skip_tls_verify=bool(obj.get("insecure-skip-tls-verify")),
            )

        return None

    def parse_exec(self, dct) -> Optional[ExecConfig]:
        if not dct or not dct.get("command"):
            return None

        env = {item["name"]: item["value"] for item in dct.get("env") or []}

        return ExecConfig(
            command=dct["command"],
            args=dct.get("args") or [],
            env=env,
            api_version=dct.get("apiVersion"),
        )

    def parse_user(self, dct) -> Optional[User]:
        name = self.take_after_last_slash(dct.get("name"))

        obj = dct.get("user") or {}

        # 'name' is the only required attribute
        if name:
            return User(
                name=name,
                username=obj.get("username"),
                password=obj.get("password"),
                token=obj.get("token"),
                client_cert_path=obj.get("client-certificate"),
                client_key_path=obj.get("client-key"),
                client_cert_data=obj.get("client-certificate-data"),
                client_key_data=obj.get("client-key-data"),
                exec=self.parse_exec(obj.get("exec")),
            )

        return None

    def load_file(self, filepath: str) -> Optional[KubeConfigFile]:
        with open(filepath, "rb") as fl:
            try:
                dct = yaml.load(fl, Loader=yaml.SafeLoader)
            except yaml.YAMLError:
                self.logger.warning(
                    "Failed to parse kube config as yaml: %s", filepath
                )
                return None

        if not isinstance(dct, dict) or dct.get("kind") != "Config":
            self.logger.warning(
                "Kube config does not have kind: Config: %s", filepath
            )
            return None

        clust_list = [self.parse_cluster(clus) for clus in dct.get("clusters") or []]
        clusters = [cluster for cluster in clust_list if cluster]

        user_list = [self.parse_user(user) for user in dct.get("users") or []]
        users = [user for user in user_list if user]

        ctx_list = [
            self.parse_context(clusters, users, ctx)
            for ctx in dct.get("contexts") or []
        ]
        contexts = [ctx for ctx in ctx_list if ctx]

        # The context is the organizing principle of a kube config so if we
        # didn't find any we failed to parse the file
        if not contexts:
            return None

        config_file = KubeConfigFile(
            filepath=filepath,
            contexts=contexts,
            users=users,
            clusters=clusters,
            current_context=self.take_after_last_slash(dct.get("current-context")),
            mtime=os.stat(filepath).st_mtime,
        )

        for context in contexts:
            context.set_file(config_file)

        return config_file

    def create_collection(self) -> KubeConfigCollection:
        collection = KubeConfigCollection()

        for filepath in self.get_candidate_files():
            config_file = self.load_file(filepath)
            if config_file:
                collection.add_file(config_file)

        return collection


def get_selector(loader: Optional[KubeConfigLoader] = None) -> KubeConfigSelector:
    loader = loader or KubeConfigLoader()
    collection = loader.create_collection()
    selector = KubeConfigSelector(collection=collection)
    return selector


def load_current_context(loader: Optional[KubeConfigLoader] = None) -> Context:
    loader = loader or KubeConfigLoader()
    collection = loader.create_collection()
    return collection.get_current_context()
