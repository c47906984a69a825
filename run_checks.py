from fastapi.testclient import TestClient
from civic_triage.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
resp = client.get('/health/db')
print(resp.status_code)
print(resp.json())

print('\nPRIORITIZED:')
print(client.get('/ai/prioritize').json())
