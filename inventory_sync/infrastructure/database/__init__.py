"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from inventory_sync.infrastructure.database.models import (
    ConsumerModel,
    OrderModel,
    ProductCategoryModel,
    ProductModel,
)
