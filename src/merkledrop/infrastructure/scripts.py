"""Central registry for Redis Lua scripts used by the distributor.

This module contains Redis Lua scripts that are registered at application startup
for EVALSHA optimization. Each script runs atomically on the Redis server, which
is what makes a claim a single all-or-nothing state transition.

Amounts are u64 values. Lua numbers are doubles and lose precision above 2^53,
so every amount crosses the script boundary as a decimal string and is compared
and added as a zero-padded fixed-width decimal string (see _U64_HELPERS).

Return Code Conventions:
    Every script returns a two-element array {code, payload}.

    "create_distributor":
        - 0: Distributor key already exists. Payload is empty.
        - 1: Distributor and its empty reserve were created. Payload is empty.

    "fund_distributor":
        - 1: Reserve credited. Payload is the new reserve balance.
        - 2: Distributor not found. Payload is empty.
        - 3: Reserve balance would overflow u64. Payload is the current balance.

    "claim":
        - 0: ClaimStatus already exists for this index. Payload is the
             existing ClaimStatus JSON.
        - 1: Claim committed: ClaimStatus created, counters incremented and the
             amount moved from the reserve to the claimant. Payload is the
             stored ClaimStatus JSON.
        - 2: Distributor not found. Payload is empty.
        - 3: num_nodes_claimed already reached max_num_nodes. Payload is empty.
        - 4: total_amount_claimed + amount exceeds max_total_claim (or u64).
             Payload is empty.
        - 5: Reserve balance is lower than amount. Payload is the reserve
             balance.
        - 6: Claimant token balance would overflow u64. Payload is empty.
"""

from __future__ import annotations

CLAIM_ALREADY_EXISTS = 0
SUCCESS = 1
DISTRIBUTOR_MISSING = 2
EXCEEDED_NODES = 3
EXCEEDED_CLAIM = 4
INSUFFICIENT_RESERVE = 5
CLAIMANT_OVERFLOW = 6

# For fund_distributor, code 3 means the reserve would overflow u64.
RESERVE_OVERFLOW = 3

_U64_HELPERS = """
    local WIDTH = 21
    local U64_MAX = '018446744073709551615'

    local function pad(s)
        s = s or '0'
        return string.rep('0', WIDTH - #s) .. s
    end

    local function strip(s)
        local out = string.gsub(s, '^0+', '')
        if out == '' then
            return '0'
        end
        return out
    end

    local function add(a, b)
        local digits = {}
        local carry = 0
        for i = WIDTH, 1, -1 do
            local d = tonumber(string.sub(a, i, i)) + tonumber(string.sub(b, i, i)) + carry
            digits[i] = tostring(d % 10)
            carry = math.floor(d / 10)
        end
        return table.concat(digits)
    end

    local function sub(a, b)
        local digits = {}
        local borrow = 0
        for i = WIDTH, 1, -1 do
            local d = tonumber(string.sub(a, i, i)) - tonumber(string.sub(b, i, i)) - borrow
            if d < 0 then
                d = d + 10
                borrow = 1
            else
                borrow = 0
            end
            digits[i] = tostring(d)
        end
        return table.concat(digits)
    end
"""

CREATE_DISTRIBUTOR_SCRIPT = """
    local distributor_key = KEYS[1]
    local reserve_key = KEYS[2]
    local created_ts = tonumber(ARGV[1])
    local distributor_id = ARGV[2]

    if redis.call('EXISTS', distributor_key) == 1 then
        return {0, ''}
    end

    -- Remaining ARGV entries are field/value pairs of the distributor hash
    for i = 3, #ARGV, 2 do
        redis.call('HSET', distributor_key, ARGV[i], ARGV[i + 1])
    end

    if redis.call('EXISTS', reserve_key) == 0 then
        redis.call('SET', reserve_key, '0')
    end

    redis.call('ZADD', 'distributors:all', created_ts, distributor_id)
    return {1, ''}
"""

FUND_DISTRIBUTOR_SCRIPT = (
    _U64_HELPERS
    + """
    local distributor_key = KEYS[1]
    local reserve_key = KEYS[2]
    local amount = pad(ARGV[1])

    if redis.call('EXISTS', distributor_key) == 0 then
        return {2, ''}
    end

    local current = pad(redis.call('GET', reserve_key))
    local new_balance = add(current, amount)
    if new_balance > U64_MAX then
        return {3, strip(current)}
    end

    redis.call('SET', reserve_key, strip(new_balance))
    return {1, strip(new_balance)}
"""
)

CLAIM_SCRIPT = (
    _U64_HELPERS
    + """
    local distributor_key = KEYS[1]
    local claim_key = KEYS[2]
    local reserve_key = KEYS[3]
    local claimant_key = KEYS[4]
    local claim_json = ARGV[1]
    local amount = pad(ARGV[2])

    if redis.call('EXISTS', distributor_key) == 0 then
        return {2, ''}
    end

    local fields = redis.call('HMGET', distributor_key,
        'max_num_nodes', 'max_total_claim', 'num_nodes_claimed', 'total_amount_claimed')
    local max_num_nodes = pad(fields[1])
    local max_total_claim = pad(fields[2])
    local num_nodes_claimed = pad(fields[3])
    local total_amount_claimed = pad(fields[4])

    -- Caps precede the receipt lookup: once max_num_nodes is reached a
    -- repeated index reports code 3, not code 0
    if num_nodes_claimed >= max_num_nodes then
        return {3, ''}
    end

    -- Checked addition: the padded width holds any sum of two u64 values
    local new_total = add(total_amount_claimed, amount)
    if new_total > U64_MAX or new_total > max_total_claim then
        return {4, ''}
    end

    -- Creation of the receipt is the double-claim guard
    local existing = redis.call('GET', claim_key)
    if existing then
        return {0, existing}
    end

    local reserve = pad(redis.call('GET', reserve_key))
    if reserve < amount then
        return {5, strip(reserve)}
    end

    local claimant_balance = add(pad(redis.call('GET', claimant_key)), amount)
    if claimant_balance > U64_MAX then
        return {6, ''}
    end

    redis.call('SET', claim_key, claim_json)
    redis.call('HSET', distributor_key, 'num_nodes_claimed',
        strip(add(num_nodes_claimed, pad('1'))))
    redis.call('HSET', distributor_key, 'total_amount_claimed', strip(new_total))
    redis.call('SET', reserve_key, strip(sub(reserve, amount)))
    redis.call('SET', claimant_key, strip(claimant_balance))

    return {1, claim_json}
"""
)

DISTRIBUTOR_SCRIPTS = {
    "create_distributor": CREATE_DISTRIBUTOR_SCRIPT,
    "fund_distributor": FUND_DISTRIBUTOR_SCRIPT,
    "claim": CLAIM_SCRIPT,
}
