# pawcircle/api/health/routes.py
import logging
from flask import Blueprint, jsonify, current_app, request, Response

from pawcircle.utils.datetime_utils import DateTimeUtils

health_bp = Blueprint('health_bp', __name__)

@health_bp.route('', methods=['GET', 'HEAD'])
def health_check():
    """
    서버 상태 확인.
    GET은 Firestore 왕복 조회까지 확인하고 실패하면 503(degraded)을 반환합니다.
    HEAD는 프로세스 생존 여부만 빈 본문 200으로 응답합니다.
    """
    if request.method == 'HEAD':
        return Response(status=200)

    response = {"status": "ok", "timestamp": DateTimeUtils.to_iso_string(DateTimeUtils.now())}
    try:
        db = current_app.services['db']
        list(db.collection('health_checks').limit(1).stream())
        response["datastore"] = "ok"
        return jsonify(response), 200
    except Exception as e:
        logging.error(f"Health check datastore round-trip failed: {e}", exc_info=True)
        response["status"] = "degraded"
        response["datastore"] = "unreachable"
        return jsonify(response), 503
