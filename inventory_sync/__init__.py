"""
Sincronización incremental one-way: Unleashed Software -> tienda.

Este paquete está diseñado para ejecutarse como job (cron / task scheduler).

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin cambios espurios.
- Incremental: se apoya en el watermark "LastModifiedOn" de cada job.
- Validar antes de escribir: claves naturales duplicadas abortan la corrida.
- Control total: mapeo/transformaciones en código, por job.
"""

__version__ = "1.0.0"
