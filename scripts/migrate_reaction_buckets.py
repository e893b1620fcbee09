# scripts/migrate_reaction_buckets.py

import logging
import os

from social.core.config import config_by_name
from social.models.database import connect
from social.models.reaction import ReactionRecord
from social.stores.reaction_store import ReactionStore

def migrate_reaction_buckets(store: ReactionStore, dry_run: bool = False) -> int:
    """
    위치 기반 'likes' 배열로 저장된 반응 문서를 종류별 'buckets' 형식으로 변환합니다.
    중복 사용자나 여러 버킷에 걸친 사용자는 반응 종류 순서상 첫 버킷에만 남깁니다.

    :return: 변환한(dry_run이면 변환 대상) 문서 수
    """
    count = 0
    for data in list(store.iter_legacy()):
        if not ReactionRecord.is_legacy_layout(data):
            continue
        if dry_run:
            count += 1
            continue
        if store.upgrade_legacy(data):
            count += 1
    return count

if __name__ == '__main__':
    # APP_ENV로 대상 DB를, DRY_RUN=1로 변환 없이 대상 수만 세도록 지정합니다.
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s')
    config = config_by_name[os.getenv('APP_ENV', 'development')]
    dry_run = os.getenv('DRY_RUN') == '1'
    try:
        db = connect(config)
        store = ReactionStore(db, config.REACTIONS_COLLECTION)
        converted = migrate_reaction_buckets(store, dry_run=dry_run)
        label = "변환 대상" if dry_run else "변환 완료"
        print(f"{label} 문서 수: {converted}")
    except Exception as e:
        logging.error(f"반응 문서 변환 중 오류 발생: {e}", exc_info=True)
        raise SystemExit(1)
