import json
import os
from json import JSONDecodeError
from typing import Optional

import google.auth
from google.auth.exceptions import DefaultCredentialsError
from google.cloud.bigquery import Client
from google.oauth2 import service_account

from bqclient import conf
from bqclient.exceptions import AuthError

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


def _new_client(credentials, project: Optional[str]) -> Client:
    if not project:
        raise AuthError(
            "No project was given and none could be determined from the credentials. "
            "Pass a project or set the GCP_PROJECT variable."
        )
    return Client(credentials=credentials, project=project)


def _get_project(project: Optional[str], credentials: Optional[service_account.Credentials] = None) -> Optional[str]:
    if project is not None:
        return project
    if credentials is not None:
        return credentials.project_id
    return os.getenv("GCP_PROJECT") or conf.GCP_PROJECT


def _get_bq_client_from_credential_file(path: str, project: Optional[str] = None) -> Client:
    try:
        credentials = service_account.Credentials.from_service_account_file(filename=path, scopes=SCOPES)
    except FileNotFoundError as e:
        raise AuthError(f"Credentials file not found: {path}") from e
    except OSError as e:
        raise AuthError(f"Credentials file could not be read: {path}: {e}") from e
    except (ValueError, KeyError) as e:
        raise AuthError(f"Invalid service account credentials file {path}: {e}") from e
    return _new_client(credentials, _get_project(project, credentials))


def _get_bq_client_from_credentials(project: Optional[str] = None) -> Optional[Client]:
    gcp_credentials = os.getenv("GCP_CREDENTIALS") or conf.GCP_CREDENTIALS
    try:
        json_credentials = json.loads(gcp_credentials)
    except JSONDecodeError:
        return None
    try:
        credentials = service_account.Credentials.from_service_account_info(info=json_credentials, scopes=SCOPES)
    except (ValueError, KeyError) as e:
        raise AuthError(f"Invalid service account credentials in GCP_CREDENTIALS: {e}") from e
    return _new_client(credentials, _get_project(project, credentials))


def _get_bq_client_from_credential_files(project: Optional[str] = None) -> Optional[Client]:
    env_credentials_path = os.getenv("GCP_CREDENTIALS_PATH")
    if env_credentials_path and env_credentials_path != conf.GCP_CREDENTIALS_PATH:
        return _get_bq_client_from_credential_file(env_credentials_path, project)
    gcp_credentials_path = env_credentials_path or conf.GCP_CREDENTIALS_PATH
    if gcp_credentials_path.endswith(".json") and os.path.isfile(gcp_credentials_path):
        return _get_bq_client_from_credential_file(gcp_credentials_path, project)
    return None


def _get_bq_client_from_default(project: Optional[str] = None) -> Client:
    try:
        credentials, default_project = google.auth.default(scopes=SCOPES)
    except DefaultCredentialsError as e:
        raise AuthError(f"No credentials could be found: {e}") from e
    return _new_client(credentials, _get_project(project) or default_project)


def get_bq_client(project: Optional[str] = None, credentials_path: Optional[str] = None) -> Client:
    """Build an authenticated BigQuery client.

    The credentials are searched in the following order:

    1. the service account file given as `credentials_path`
    2. the content of a service account json file, in the variable `GCP_CREDENTIALS`
    3. the path of a service account json file, in the variable `GCP_CREDENTIALS_PATH`.
       A path set in the environment must exist, while the default path of :mod:`bqclient.conf` is skipped if absent.
    4. the application default credentials

    Variables are read from the environment first, then from :mod:`bqclient.conf`.

    :param project: Id of the project to bill. Defaults to the project of the credentials.
    :param credentials_path: Path to a service account json file
    :return: a :class:`google.cloud.bigquery.Client`
    :raises AuthError: if the credentials are missing or invalid
    """
    if credentials_path is not None:
        return _get_bq_client_from_credential_file(credentials_path, project)
    client = _get_bq_client_from_credentials(project)
    if client is None:
        client = _get_bq_client_from_credential_files(project)
    if client is None:
        client = _get_bq_client_from_default(project)
    return client
