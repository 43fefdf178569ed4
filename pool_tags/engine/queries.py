"""GraphQL documents sent to the Balancer v3 pools subgraph."""

POOLS_QUERY = """
query GetPools($first: Int!, $lastId: String!) {
    pools(
        first: $first
        orderBy: id
        orderDirection: asc
        where: { id_gt: $lastId }
    ) {
        id
        address
        factory {
            type
            version
        }
        stableParams {
            amp
        }
        weightedParams {
            weights
        }
        gyro2Params {
            sqrtAlpha
            sqrtBeta
        }
        gyroEParams {
            alpha
            beta
        }
        quantAMMWeightedParams {
            epsilonMax
            maxTradeSizeRatio
        }
        reClammParams {
            lastTimestamp
        }
        lbpParams {
            owner
            projectToken
            reserveToken
        }
    }
}
"""


def pools_variables(cursor: str, page_size: int) -> dict[str, object]:
    return {"first": page_size, "lastId": cursor}


__all__ = ["POOLS_QUERY", "pools_variables"]
