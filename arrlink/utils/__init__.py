"""
Utilitaires et constantes pour arrlink.

Ce module contient les constantes et les primitives de temporisation
partagees (horloge, echeance, re-verification differee).
"""
