import os
from dotenv import load_dotenv

load_dotenv()

# アプリケーションバージョン
VERSION = "1.4.0"

# 本番環境では必ず環境変数 DEBUG=false を設定すること
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# 空の場合はインメモリストアを使用（再起動で消える・開発用）
DATABASE_URL = os.getenv("DATABASE_URL", "")

# 本番環境では環境変数 CORS_ORIGINS にドメインを指定すること（例: https://example.com）
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = _cors_env.split(",") if _cors_env else []

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# パスワードハッシュ
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# セッション設定
SESSION_COOKIE = "cloack_session"
ROLE_COOKIE = "cloack_role"
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "8"))
REMEMBER_TTL_DAYS = int(os.getenv("REMEMBER_TTL_DAYS", "14"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false" if DEBUG else "true").lower() == "true"

# パスワードリセット
RESET_TOKEN_TTL_MINUTES = int(os.getenv("RESET_TOKEN_TTL_MINUTES", "30"))
# メール送信が無い環境ではトークンをレスポンスで返す（開発時のみ推奨）
EXPOSE_RESET_TOKEN = os.getenv("EXPOSE_RESET_TOKEN", "true" if DEBUG else "false").lower() == "true"

# 初期管理者
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@cloakroom.local")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "")

# 一覧APIの最大件数
LIST_LIMIT = 200

# 電話番号の確認コード
PHONE_CODE_TTL_MINUTES = int(os.getenv("PHONE_CODE_TTL_MINUTES", "5"))
PHONE_CODE_MAX_ATTEMPTS = 5
# SMS 送信が無い環境ではコードをレスポンスで返す（開発時のみ推奨）
EXPOSE_PHONE_CODE = os.getenv("EXPOSE_PHONE_CODE", "true" if DEBUG else "false").lower() == "true"

# 商品一覧のページサイズ
PRODUCT_PAGE_SIZE = 24
PRODUCT_PAGE_SIZE_MAX = 100
