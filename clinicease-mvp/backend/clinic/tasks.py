import logging
from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    max_retries=0,            # 外部 LLM 只调一次，失败就告诉用户重新提交
    acks_late=True,           # 任务执行完才 ack，防止 worker 崩溃时任务丢失
    reject_on_worker_lost=True,
)
def generate_prescription_table(self, draft_id: str):
    """
    异步把口述处方整理成表格。

    状态流转：pending → processing → completed | failed
    不重试：失败后 draft 标记为 failed，前端提示用户重新提交。
    """
    from clinic.models import PrescriptionDraft
    from clinic.services import structure_prescription

    logger.info("[Celery][generate_prescription_table] 开始处理 draft_id=%s", draft_id)

    try:
        draft = PrescriptionDraft.objects.get(id=draft_id)
    except PrescriptionDraft.DoesNotExist:
        logger.error("[Celery] Draft %s 不存在，跳过", draft_id)
        return

    # 标记为处理中
    draft.status = 'processing'
    draft.save(update_fields=['status', 'updated_at'])

    try:
        table, model = structure_prescription(draft.speech_input)
    except Exception as exc:
        logger.error("[Celery] draft_id=%s 处理失败: %s", draft_id, exc)
        draft.status = 'failed'
        draft.error_message = str(exc)
        draft.save(update_fields=['status', 'error_message', 'updated_at'])
        return

    draft.prescription_table = table
    draft.llm_model = model
    draft.status = 'completed'
    draft.completed_at = timezone.now()
    draft.save(update_fields=['prescription_table', 'llm_model', 'status', 'completed_at', 'updated_at'])

    logger.info("[Celery] draft_id=%s 处理完成", draft_id)
