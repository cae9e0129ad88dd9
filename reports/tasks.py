"""
Reports — Celery Tasks

Periodic checks over the ledger. Tasks only read; they never write
movements.

@file reports/tasks.py
"""

import logging

from celery import shared_task

logger = logging.getLogger('waretrack')


@shared_task(name='reports.scan_negative_stock')
def scan_negative_stock_task():
    """
    Log a warning listing every active product whose live balance is
    negative. Registered with Celery Beat to run periodically.
    """
    from .services import ReportService

    products = ReportService.negative_stock_products()
    if products:
        logger.warning(
            'Negative stock on %d product(s): %s',
            len(products),
            ', '.join(f'{p} ({p.stock_balance})' for p in products),
        )
    else:
        logger.info('scan_negative_stock_task completed: no negative balances.')
    return {
        'negative_count': len(products),
        'product_ids': [str(p.pk) for p in products],
    }
