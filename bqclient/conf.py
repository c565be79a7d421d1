# This file may be edited by the user.
# Every variable defined here can be overridden by an environment variable of the same name.

# Method 1. Set this variable here (e.g. "my-project") or set it as an environment variable
GCP_PROJECT = None


# Method 2.A Set this variable here or set it as an environment variable
GCP_CREDENTIALS_PATH = "client_secret.json"


# Method 2.B Set this variable here or set it as an environment variable
GCP_CREDENTIALS = "Content of your credentials json file"


# Location where new datasets are created
BQ_LOCATION = "US"
