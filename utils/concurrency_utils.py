# utils/concurrency_utils.py
import logging
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor, wait, TimeoutError as FuturesTimeoutError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# ok=False con error -> la tarea lanzó excepción o no terminó dentro del plazo
ResultadoTarea = namedtuple('ResultadoTarea', ['elemento', 'ok', 'valor', 'error'])


def ejecutar_todos(funcion, elementos, max_workers=8, timeout=None):
    """
    Ejecuta funcion(elemento) para cada elemento en paralelo y espera a que
    todas terminen (equivalente a Promise.allSettled).

    Ningún error individual se propaga: cada fallo queda en su ResultadoTarea.
    Las tareas que no terminan antes de `timeout` se reportan con
    FuturesTimeoutError y sus hilos no se esperan. cancel() solo detiene las
    tareas que aún no empezaron: una tarea en curso al vencer el plazo sigue
    corriendo y sus efectos (por ejemplo, un evict) ocurren después del retorno.

    Args:
        funcion (callable): Función a aplicar a cada elemento
        elementos (iterable): Elementos a procesar
        max_workers (int): Máximo de hilos simultáneos
        timeout (float, optional): Plazo global en segundos para el lote

    Returns:
        list[ResultadoTarea]: Un resultado por elemento, en el orden de entrada
    """
    elementos = list(elementos)
    if not elementos:
        return []

    workers = max(1, min(int(max_workers), len(elementos)))
    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [(executor.submit(funcion, elemento), elemento) for elemento in elementos]
        _, pendientes = wait([future for future, _ in futures], timeout=timeout)

        resultados = []
        for future, elemento in futures:
            if future in pendientes:
                future.cancel()
                resultados.append(ResultadoTarea(
                    elemento, False, None,
                    FuturesTimeoutError(f"Tarea sin terminar tras {timeout}s")
                ))
                continue

            error = future.exception()
            if error is not None:
                resultados.append(ResultadoTarea(elemento, False, None, error))
            else:
                resultados.append(ResultadoTarea(elemento, True, future.result(), None))

        if pendientes:
            logger.warning(f"{len(pendientes)} de {len(elementos)} tareas excedieron el plazo de {timeout}s")

        return resultados
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
