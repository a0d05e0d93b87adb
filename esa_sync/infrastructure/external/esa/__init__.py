"""
Adaptador HTTP de la API v1 de esa (puerto EsaSource).
"""
