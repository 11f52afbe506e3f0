from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Метрики для HTTP запросов
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Отказы политики доступа (роль или владение)
authorization_denials_total = Counter(
    'authorization_denials_total',
    'Requests rejected by the authorization policy',
    ['action', 'reason']
)

# Ошибки хранилища
store_failures_total = Counter('store_failures_total', 'Unexpected persistence failures')

def metrics_endpoint():
    """Prometheus metrics endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
