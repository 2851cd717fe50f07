"""
Remote bash scripts for stackpush deployments.

Each script is sent over SSH stdin and run with ``bash -s -- <args>``. Scripts
never have user values formatted into their text; everything variable
arrives as a positional argument.
"""

# $1 = SSH user to add to the docker group
SERVER_PREP_SCRIPT = r'''
set -euo pipefail
SSH_USER="$1"

if command -v dnf >/dev/null 2>&1; then
  PKG=dnf
elif command -v yum >/dev/null 2>&1; then
  PKG=yum
else
  echo "[PREP] Unsupported distro: cannot find dnf/yum" >&2
  exit 1
fi

echo "[PREP] Updating system packages with $PKG..."
sudo "$PKG" update -y

echo "[PREP] Installing Docker and Nginx..."
sudo "$PKG" install -y docker nginx

if ! sudo docker compose version >/dev/null 2>&1 && ! command -v docker-compose >/dev/null 2>&1; then
  echo "[PREP] Installing Docker Compose plugin..."
  sudo mkdir -p /usr/local/lib/docker/cli-plugins
  sudo curl -fsSL "https://github.com/docker/compose/releases/latest/download/docker-compose-linux-$(uname -m)" \
    -o /usr/local/lib/docker/cli-plugins/docker-compose
  sudo chmod +x /usr/local/lib/docker/cli-plugins/docker-compose
fi

echo "[PREP] Adding $SSH_USER to the docker group..."
sudo usermod -aG docker "$SSH_USER"

echo "[PREP] Enabling and starting services..."
sudo systemctl enable docker
sudo systemctl start docker
sudo systemctl enable nginx
sudo systemctl start nginx

echo "[PREP] Installed versions:"
sudo docker --version
sudo docker compose version 2>/dev/null || docker-compose version
nginx -v 2>&1
'''

# Shared prologue: pick docker with or without sudo (group membership added
# during preparation does not apply to the current login session)
_DOCKER_PROLOGUE = r'''
if docker info >/dev/null 2>&1; then
  SUDO=""
else
  SUDO="sudo"
fi
'''

# $1 = remote project dir, $2 = log lines per container
COMPOSE_DEPLOY_SCRIPT = r'''
set -euo pipefail
REMOTE_DIR="$1"
TAIL_LINES="$2"
''' + _DOCKER_PROLOGUE + r'''
if $SUDO docker compose version >/dev/null 2>&1; then
  COMPOSE="$SUDO docker compose"
else
  COMPOSE="$SUDO docker-compose"
fi

echo "[DEPLOY] Navigating to $REMOTE_DIR"
cd "$REMOTE_DIR"

echo "[IDEMPOTENCY] Stopping and removing old containers..."
$COMPOSE down --remove-orphans || true

echo "[DOCKER] Building and running new containers..."
$COMPOSE up -d --build

CONTAINERS="$($COMPOSE ps -q)"
if [ -z "$CONTAINERS" ]; then
  echo "[HEALTH] No containers found after start" >&2
  exit 1
fi

for CID in $CONTAINERS; do
  echo "[CONTAINER] $($SUDO docker ps -a --filter "id=$CID" --format '{{.Names}} {{.Status}}')"
  echo "[HEALTH] Last $TAIL_LINES log lines:"
  $SUDO docker logs --tail "$TAIL_LINES" "$CID" 2>&1 || true
done
'''

# $1 = remote project dir, $2 = container/image name, $3 = app port, $4 = log lines
DOCKERFILE_DEPLOY_SCRIPT = r'''
set -euo pipefail
REMOTE_DIR="$1"
NAME="$2"
APP_PORT="$3"
TAIL_LINES="$4"
''' + _DOCKER_PROLOGUE + r'''
echo "[DEPLOY] Navigating to $REMOTE_DIR"
cd "$REMOTE_DIR"

echo "[IDEMPOTENCY] Removing old container..."
$SUDO docker rm -f "$NAME" >/dev/null 2>&1 || true

echo "[DOCKER] Building image $NAME..."
$SUDO docker build -t "$NAME" .

echo "[DOCKER] Starting container $NAME..."
$SUDO docker run -d --name "$NAME" --restart unless-stopped -p "$APP_PORT:$APP_PORT" "$NAME"

CID="$($SUDO docker ps -aq --filter "name=^${NAME}$")"
if [ -z "$CID" ]; then
  echo "[HEALTH] No containers found after start" >&2
  exit 1
fi

echo "[CONTAINER] $($SUDO docker ps -a --filter "id=$CID" --format '{{.Names}} {{.Status}}')"
echo "[HEALTH] Last $TAIL_LINES log lines:"
$SUDO docker logs --tail "$TAIL_LINES" "$CID" 2>&1 || true
'''

# $@ = default site configs to remove
NGINX_APPLY_SCRIPT = r'''
set -euo pipefail
for SITE in "$@"; do
  sudo rm -f "$SITE"
done

echo "[NGINX] Testing configuration syntax..."
sudo nginx -t 2>&1

echo "[NGINX] Reloading nginx..."
sudo systemctl reload nginx
'''

# Markers parsed from remote output
CONTAINER_MARKER = "[CONTAINER] "
HEALTH_MARKER = "[HEALTH] "
NGINX_RELOAD_MARKER = "[NGINX] Reloading nginx..."
