"""
Ingesta de eventos de analítica

- ingestar_evento.py - POST de eventos; guarda en ANALYTICS_TABLE y difunde
  {type: 'new-event'} a las conexiones del tenant
"""
