"""
BOM Tasks.

Celery tasks for BOM document maintenance.
"""

from celery import shared_task
from django.db import DatabaseError
import logging

from domain.shared.exceptions import BOMValidationException, EntityNotFoundException

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def validate_bom_document(self, bom_id: str):
    """
    Re-validate the stored item tree of a BOM document.

    Reports problems only; nothing is saved.
    """
    from application.services.bom_service import get_bom_service

    try:
        result = get_bom_service().check(bom_id)
    except EntityNotFoundException:
        logger.error(f"BOM {bom_id} not found")
        return {'error': 'BOM not found'}
    except DatabaseError as e:
        logger.error(f"Error validating BOM {bom_id}: {e}")
        raise self.retry(exc=e, countdown=60)

    logger.info(f"BOM {bom_id} validation: {len(result.problems)} issues found")

    return {
        'bom_id': bom_id,
        'items_count': len(result.tree) if result.tree is not None else 0,
        'level_corrections': result.level_corrections,
        'valid': result.is_valid,
        'issues': [problem.as_dict() for problem in result.problems],
    }


@shared_task(bind=True, max_retries=3)
def recalculate_bom_totals(self, bom_id: str):
    """
    Recompute item amounts and the material total of a stored BOM.

    Saves only when a number changed.
    """
    from application.services.bom_service import get_bom_service

    try:
        document, changed = get_bom_service().recalculate(bom_id)
    except EntityNotFoundException:
        logger.error(f"BOM {bom_id} not found")
        return {'error': 'BOM not found'}
    except BOMValidationException as e:
        logger.warning(f"BOM {bom_id} cannot be recalculated: {e.message}")
        return {
            'bom_id': bom_id,
            'success': False,
            'issues': e.details.get('problems', []),
        }
    except DatabaseError as e:
        logger.error(f"Error recalculating BOM {bom_id}: {e}")
        raise self.retry(exc=e, countdown=60)

    return {
        'bom_id': bom_id,
        'bom_number': document.bom_number,
        'total_material_cost': str(document.total_material_cost),
        'changed': changed,
        'success': True,
    }
