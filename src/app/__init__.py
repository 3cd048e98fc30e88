"""App: coração do relay, com orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: casos de uso (intake de notificações)
- services/: validação de canal e reconciliação de sync
- domain/: modelos compartilhados (canal, change-set, notificação)
- infra/: implementações concretas de IO (stores, provider, forward)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs estruturados

Padrão: app executa; api adapta; config configura; utils apoia.
"""
