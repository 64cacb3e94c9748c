"""
Couche domaine (core).

Contient les entites metier, ports (interfaces abstraites), objets valeur
et la taxonomie d'erreurs. Cette couche ne depend d'aucun framework HTTP.

Sous-packages :
- entities/ : Entites renvoyees par les backends (Series, Episode, Movie, QueueItem)
- ports/ : Interfaces abstraites des clients backend
- value_objects/ : Objets valeur immutables (selection, version d'API, contexte)
"""
