# social/models/user.py
from dataclasses import dataclass
from typing import Any, Dict, Optional

@dataclass
class UserProfile:
    """
    반응/댓글 응답에 포함되는 사용자 프로필 조각.
    'users' 컬렉션 문서에서 표시용 필드만 추려냅니다.
    """
    id: str
    name: str = ''
    first_name: str = ''
    last_name: str = ''
    avatar: Optional[str] = None

    @classmethod
    def from_dict(cls, user_id: str, data: Dict[str, Any]) -> 'UserProfile':
        first_name = data.get('first_name') or ''
        last_name = data.get('last_name') or ''
        name = data.get('name') or data.get('nickname') or f"{first_name} {last_name}".strip()
        return cls(
            id=user_id,
            name=name,
            first_name=first_name,
            last_name=last_name,
            avatar=data.get('profile_image_url')
        )
