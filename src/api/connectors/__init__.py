"""Connectors por canal: adapters de borda para requisições externas.

Estrutura:
- google_calendar/: headers de push notification do Google Calendar
"""

__all__: list[str] = []
