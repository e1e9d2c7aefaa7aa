# Transport clients
from clients.http_client import HttpClient, TransportError, bearer_headers
from clients.table_client import TableQueryClient, TableQueryError, status_for_api_error
