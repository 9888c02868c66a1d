"""Multi-tenant field-service CRM API."""
