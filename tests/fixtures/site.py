"""Sample inventory: two web servers behind a load balancer."""

from avalanche import lazy, mk_default, mk_option


def web(group_name, **_):
    return {
        "options": {"nginx": {"enable": mk_option(bool, default=False)}},
        "config": {"nginx": {"enable": True}, "role": group_name},
    }


def lb(groups_members, **_):
    return {
        "haproxy": {
            "backends": lazy(lambda: sorted(h.config.ip for h in groups_members.web.values())),
        },
    }


inventory = {
    "groups": {
        "web": web,
        "lb": lb,
    },
    "hosts": {
        "web01.example.com": lambda groups: {"groups": [groups.web], "ip": "10.0.0.11"},
        "web02.example.com": lambda groups: {"groups": [groups.web], "ip": "10.0.0.12"},
        "lb01.example.com": lambda groups: {"groups": [groups.lb], "ip": "10.0.0.2"},
    },
    "default_modules": [
        {"monitoring": {"enable": mk_default(True)}},
    ],
}
