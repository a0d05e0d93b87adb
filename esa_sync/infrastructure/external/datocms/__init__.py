"""
Adaptador de DatoCMS (puerto TargetCms): GraphQL para leer, CMA REST para escribir.
"""
