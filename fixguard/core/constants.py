"""
Static lookup tables for the autofix safety heuristics.

All tables are built once at import time and are read-only afterwards
(frozensets, tuples, or MappingProxyType). Nothing in this module is
mutated at runtime.
"""

import re
from types import MappingProxyType


# Tools whose name as the first token marks a shell command
COMMAND_KEYWORDS = frozenset({
    'npm', 'yarn', 'git', 'docker', 'kubectl', 'curl', 'wget', 'ssh', 'scp', 'rsync',
    'grep', 'sed', 'awk', 'find', 'ls', 'cd', 'mkdir', 'rm', 'cp', 'mv', 'chmod',
    'chown', 'sudo', 'su', 'ps', 'top', 'htop', 'kill', 'killall', 'systemctl',
    'service', 'crontab', 'tar', 'gzip', 'zip', 'unzip', 'cat', 'head', 'tail',
    'less', 'more', 'vim', 'nano', 'emacs', 'code', 'open', 'explorer', 'ping',
    'traceroute', 'nslookup', 'dig', 'netstat', 'ss', 'iptables', 'ufw', 'tcpdump',
    'wireshark', 'nmap', 'john', 'hashcat', 'hydra', 'metasploit', 'burp', 'owasp',
    'nikto', 'sqlmap', 'aircrack', 'reaver',
})

# Extensions (text after the last dot) that mark a file reference
FILE_EXTENSION_KEYWORDS = frozenset({
    'js', 'ts', 'jsx', 'tsx', 'py', 'java', 'c', 'cpp', 'cs', 'go', 'rs', 'rb',
    'php', 'pl', 'sh', 'bash', 'zsh', 'fish', 'ps1', 'bat', 'cmd', 'sql', 'html',
    'css', 'scss', 'sass', 'less', 'xml', 'json', 'yaml', 'yml', 'toml', 'ini',
    'cfg', 'conf', 'config', 'env', 'gitignore', 'dockerignore', 'editorconfig',
    'prettierrc', 'eslintrc', 'babelrc', 'tsconfigjson', 'packagejson', 'composerjson',
    'gemfile', 'pipfile', 'storybook', 'license',
})

# Standalone file names with one of these extensions are strong code signals
STANDALONE_FILE_PATTERN = re.compile(
    r'^[a-zA-Z0-9._-]+\.(json|js|ts|py|md|txt|yml|yaml|xml|html|css|scss|sh|sql'
    r'|env|cfg|conf|ini|toml|lock|log)$',
    re.IGNORECASE,
)

# First path segment that indicates a repository path
CODE_DIRECTORY_PREFIXES = frozenset({
    'src', 'lib', 'bin', 'dist', 'build', 'out', 'output', 'target',
    'tests', 'test', 'spec', 'specs', '__tests__', '__mocks__',
    'docs', 'doc', 'documentation',
    'config', 'configs', 'conf', 'settings',
    'scripts', 'tools', 'utils', 'helpers', 'common',
    'components', 'modules', 'packages', 'plugins',
    'assets', 'static', 'public', 'resources', 'images', 'icons',
    'styles', 'css', 'scss', 'less',
    'node_modules', 'vendor', 'third_party', 'external',
    'api', 'routes', 'controllers', 'models', 'views', 'services',
    'app', 'apps', 'pages', 'layouts', 'templates',
    '.github', '.gitlab', '.circleci', '.vscode',
})

# Common English words that rarely belong in code markers
COMMON_WORDS = frozenset({
    'i', 'a', 'an', 'the', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
    'is', 'are', 'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did',
    'will', 'would', 'could', 'should', 'may', 'might', 'can', 'must', 'shall',
    'this', 'that', 'these', 'those', 'here', 'there', 'where', 'when', 'why', 'how',
    'all', 'any', 'some', 'many', 'much', 'few', 'little', 'most', 'more', 'less',
    'one', 'two', 'three', 'first', 'last', 'next', 'previous', 'before', 'after',
})

# Slash-joined word pairs that read as prose, not paths
NATURAL_LANGUAGE_PHRASES = frozenset({
    'read/write', 'pass/fail', 'on/off', 'in/out', 'up/down', 'left/right', 'true/false', 'yes/no',
    'black/white', 'day/night', 'hot/cold', 'big/small', 'fast/slow', 'high/low', 'old/new',
    'start/stop', 'begin/end', 'open/close', 'save/load', 'push/pull', 'give/take',
    'buy/sell', 'win/lose', 'love/hate', 'good/bad', 'right/wrong', 'rich/poor',
    'male/female', 'young/old', 'early/late', 'easy/hard', 'safe/dangerous',
    'input/output', 'enable/disable', 'get/set', 'and/or', 'either/or',
})

# Short or generic words that are ambiguous between prose and code
AMBIGUOUS_WORD_PATTERNS = (
    re.compile(r'^[a-z]{1,3}$'),
    re.compile(r'^(go|do|be|if|it|my|we|he|she|you|us|me|him|her|our|his|its|who|what|why|how|when|where)$', re.IGNORECASE),
    re.compile(r'^(one|two|three|four|five|six|seven|eight|nine|ten)$', re.IGNORECASE),
    re.compile(r'^(red|blue|green|yellow|orange|purple|pink|brown|black|white|gray|grey)$', re.IGNORECASE),
    re.compile(r'^(big|small|large|tiny|huge|mini|max|min)$', re.IGNORECASE),
    re.compile(r'^(new|old|fresh|stale|young|ancient|modern|classic)$', re.IGNORECASE),
    re.compile(r'^(good|bad|nice|cool|hot|cold|warm|best|worst|better|worse)$', re.IGNORECASE),
    re.compile(r'^(quick|slow|fast|rapid|swift|delayed|instant)$', re.IGNORECASE),
    re.compile(r'^(easy|hard|simple|complex|basic|advanced|tough|difficult)$', re.IGNORECASE),
)

# Phrases in the surrounding line that suggest prose
NATURAL_LANGUAGE_INDICATORS = (
    'is a', 'are a', 'was a', 'were a', 'this is', 'that is', 'it is', 'he is', 'she is',
    'would be', 'could be', 'should be', 'might be', 'must be',
    'i think', 'i believe', 'in my opinion', 'personally', 'generally',
    'for example', 'such as', 'like this', 'as follows', 'namely',
    'however', 'therefore', 'moreover', 'furthermore', 'nevertheless',
    'note that', 'remember that', 'keep in mind', 'be aware', 'make sure',
)

# Keywords in the surrounding line that suggest a technical instruction
TECHNICAL_INDICATORS = (
    'install', 'configure', 'setup', 'deploy', 'build', 'compile', 'run', 'execute',
    'command', 'script', 'function', 'method', 'class', 'variable', 'parameter',
    'api', 'endpoint', 'request', 'response', 'server', 'client', 'database',
    'repository', 'branch', 'commit', 'merge', 'push', 'pull', 'clone', 'fork',
)

# Technical terms whose presence in a heading supports a case correction
TECHNICAL_TERM_PATTERN = re.compile(
    r'\b(API|URL|HTML|CSS|JSON|XML|HTTP|HTTPS|SDK|CLI|GUI|UI|UX|SQL|NoSQL|REST|GraphQL'
    r'|JWT|OAuth|CSRF|XSS|CORS|DNS|CDN|VPN|SSL|TLS|SSH|FTP|SMTP|IMAP|TCP|UDP|IP|IPv4|IPv6'
    r'|LAN|WAN|WiFi|Bluetooth|USB|HDMI|GPU|CPU|RAM|SSD|HDD|OS|iOS|Android|Windows|Linux'
    r'|macOS|Unix|AWS|Azure|GCP|Docker|Kubernetes|Git|GitHub|GitLab|npm|yarn|pip|conda'
    r'|Maven|Gradle|Webpack|Rollup|Vite|React|Vue|Angular|Next|Nuxt|Express|Django|Flask'
    r'|Rails|Laravel|Spring|Hibernate|MongoDB|PostgreSQL|MySQL|Redis|Elasticsearch|Kafka'
    r'|RabbitMQ|Jenkins|CircleCI|Terraform|Ansible|Puppet|Chef|Vagrant|VMware|VirtualBox'
    r'|Node\.js|JavaScript|TypeScript|Kotlin|PHP|Perl|MATLAB|Firefox|Chrome|Safari'
    r'|RBAC|ABAC)\b',
    re.IGNORECASE,
)

# Words that are either ordinary prose or a proper technical name
AMBIGUOUS_TERMS = MappingProxyType({
    'word': MappingProxyType({
        'proper_form': 'Word',
        'reason': 'Could be common noun "word" OR Microsoft Word (the software)',
    }),
    'go': MappingProxyType({
        'proper_form': 'Go',
        'reason': 'Could be verb "go" OR Go programming language',
    }),
    'swift': MappingProxyType({
        'proper_form': 'Swift',
        'reason': 'Could be adjective "swift" OR Swift programming language',
    }),
    'rust': MappingProxyType({
        'proper_form': 'Rust',
        'reason': 'Could be noun "rust" OR Rust programming language',
    }),
    'ruby': MappingProxyType({
        'proper_form': 'Ruby',
        'reason': 'Could be gemstone "ruby" OR Ruby programming language',
    }),
    'python': MappingProxyType({
        'proper_form': 'Python',
        'reason': 'Could be snake "python" OR Python programming language',
    }),
    'java': MappingProxyType({
        'proper_form': 'Java',
        'reason': 'Could be island/coffee "java" OR Java programming language',
    }),
    'scala': MappingProxyType({
        'proper_form': 'Scala',
        'reason': 'Could be Italian word "scala" OR Scala programming language',
    }),
    'dart': MappingProxyType({
        'proper_form': 'Dart',
        'reason': 'Could be noun "dart" OR Dart programming language',
    }),
    'patch': MappingProxyType({
        'proper_form': 'PATCH',
        'reason': 'Could be verb/noun "patch" OR SemVer PATCH version',
    }),
    'minor': MappingProxyType({
        'proper_form': 'MINOR',
        'reason': 'Could be adjective "minor" OR SemVer MINOR version',
    }),
    'major': MappingProxyType({
        'proper_form': 'MAJOR',
        'reason': 'Could be adjective "major" OR SemVer MAJOR version',
    }),
})

# Default word lists for SafetyConfig
DEFAULT_SAFE_WORDS = ('npm', 'api', 'url', 'html', 'css', 'json', 'xml', 'http', 'https')
DEFAULT_UNSAFE_WORDS = (
    'i', 'a', 'an', 'the', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
)
