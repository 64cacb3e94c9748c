"""
Couche adaptateurs (infrastructure).

Les adaptateurs implementent les ports definis dans core/ports/ :
- api/ : Clients HTTP Sonarr, Radarr et Emby construits sur le RequestExecutor
- cli/ : Interface ligne de commande (Typer)

Chaque adaptateur depend de core/ mais core/ ne depend jamais des adaptateurs.
"""
