# tiempo_real/broadcast.py
import logging

from constants import (
    ENTREGA_OK,
    ENTREGA_GONE,
    BROADCAST_MAX_WORKERS,
    BROADCAST_TIMEOUT_SECONDS
)
from utils import ejecutar_todos

logger = logging.getLogger()
logger.setLevel(logging.INFO)


class BroadcastEngine:
    """
    Difunde un payload a todas las conexiones joined de un tenant

    Cada entrega es independiente: un fallo (o un timeout) en una conexión
    no afecta a las demás ni al resultado del broadcast. Solo un fallo al
    consultar el store se propaga (ConnectionStoreError).

    Una entrega que sigue en curso al vencer timeout_seconds cuenta como
    transitoria, pero no se interrumpe: si luego responde "gone", la conexión
    se elimina después de que broadcast() ya retornó.
    """

    def __init__(self, store, channel, max_workers=BROADCAST_MAX_WORKERS, timeout_seconds=BROADCAST_TIMEOUT_SECONDS):
        self.store = store
        self.channel = channel
        self.max_workers = max_workers
        self.timeout_seconds = timeout_seconds

    def broadcast(self, tenant_id, payload):
        """
        Args:
            tenant_id (str): Tenant destino
            payload (dict): Mensaje a difundir

        Returns:
            int: Número de entregas exitosas
        """
        conexiones = self.store.listar_unidas(tenant_id)

        # Una conexión recibe el mensaje una sola vez por broadcast
        connection_ids = list(dict.fromkeys(
            c.get('connection_id') for c in conexiones if c.get('connection_id')
        ))

        if not connection_ids:
            logger.info(f"📭 No hay conexiones activas para tenant {tenant_id}")
            return 0

        resultados = ejecutar_todos(
            lambda connection_id: self.channel.enviar(connection_id, payload),
            connection_ids,
            max_workers=self.max_workers,
            timeout=self.timeout_seconds
        )

        entregadas = sum(1 for r in resultados if r.ok and r.valor == ENTREGA_OK)
        eliminadas = sum(1 for r in resultados if r.ok and r.valor == ENTREGA_GONE)
        transitorias = len(resultados) - entregadas - eliminadas

        for resultado in resultados:
            if not resultado.ok:
                logger.error(f"Entrega a {resultado.elemento} no completada: {resultado.error}")

        logger.info(f"✅ Broadcast a tenant {tenant_id}: {entregadas}/{len(connection_ids)} entregadas")
        if eliminadas:
            logger.info(f"🧹 Se limpiaron {eliminadas} conexiones inválidas")
        if transitorias:
            logger.warning(f"{transitorias} entregas con error transitorio en tenant {tenant_id}")

        return entregadas
