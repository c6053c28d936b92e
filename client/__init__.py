from client.api import ApiClient, ApiRequestError
from client.session import Session
